"""Order number value object."""
import re
import secrets
import string
from dataclasses import dataclass
from datetime import date

SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 6


@dataclass(frozen=True)
class OrderNumber:
    """
    Human-readable order identifier.

    Format: PREFIX-YYYYMMDD-XXXXXX (date of creation + 6 random
    upper-case alphanumerics)
    Examples:
    - HF-20240315-7KQ2ZD
    - HF-20241101-A0B1C2
    """
    value: str

    _PATTERN = re.compile(r"^[A-Z]{1,8}-\d{8}-[A-Z0-9]{6}$")

    def __post_init__(self):
        if not self.value:
            raise ValueError("Order number cannot be empty")
        if not self._PATTERN.match(self.value):
            raise ValueError(
                f"Invalid order number format (expected PREFIX-YYYYMMDD-XXXXXX): {self.value}"
            )

    @classmethod
    def generate(cls, prefix: str, today: date) -> "OrderNumber":
        """Build a new candidate number. Uniqueness is checked by the caller."""
        suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
        return cls(value=f"{prefix}-{today:%Y%m%d}-{suffix}")

    def __str__(self) -> str:
        return self.value
