"""Domain name value object."""
import re
from dataclasses import dataclass

from ..exceptions import ValidationError

_DOMAIN_PATTERN = re.compile(r"^[a-z0-9]+([\-.][a-z0-9]+)*\.[a-z]{2,}$")


@dataclass(frozen=True)
class DomainName:
    """
    Fully qualified domain name, lower-cased.

    `tld` is everything after the first label, so `example.co.uk`
    yields `co.uk`.
    """
    value: str

    def __post_init__(self):
        normalized = (self.value or "").strip().lower()
        if len(normalized) > 253 or not _DOMAIN_PATTERN.match(normalized):
            raise ValidationError(f"Invalid domain name: {self.value!r}")
        object.__setattr__(self, 'value', normalized)

    @property
    def label(self) -> str:
        return self.value.split(".", 1)[0]

    @property
    def tld(self) -> str:
        return self.value.split(".", 1)[1]

    def __str__(self) -> str:
        return self.value
