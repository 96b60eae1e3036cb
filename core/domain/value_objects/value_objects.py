"""Domain value objects - pure Python immutable types."""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID, uuid4

from ..exceptions import ValidationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with currency.

    CRITICAL: Always use Decimal, never float!
    Amounts are kept at full precision; call `rounded()` to get a
    two-decimal, round-half-up value.
    """
    amount: Decimal
    currency: str = "EUR"

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"Currency must be 3-letter ISO code, got: {self.currency}"
            )

    @classmethod
    def zero(cls, currency: str = "EUR") -> "Money":
        return cls(amount=Decimal("0"), currency=currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __add__(self, other: 'Money') -> 'Money':
        """Add two Money objects (must have same currency)."""
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot add different currencies: {self.currency} vs {other.currency}"
            )
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __mul__(self, factor) -> 'Money':
        """Scale by a quantity or rate."""
        return Money(amount=self.amount * Decimal(str(factor)), currency=self.currency)

    def rounded(self) -> 'Money':
        """Round to cents, half-up."""
        return Money(
            amount=self.amount.quantize(CENTS, rounding=ROUND_HALF_UP),
            currency=self.currency,
        )

    def is_negative(self) -> bool:
        return self.amount < 0


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for task execution tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class EmailAddress:
    """Lower-cased, syntactically valid e-mail address."""

    value: str

    def __post_init__(self):
        normalized = (self.value or "").strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise ValidationError(f"Invalid e-mail address: {self.value!r}")
        object.__setattr__(self, 'value', normalized)

    def __str__(self) -> str:
        return self.value
