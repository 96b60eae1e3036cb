"""Domain services - pure business rules with no I/O."""

from .lifecycle import (
    CustomerLifecycle,
    DomainLifecycle,
    OrderAction,
    OrderLifecycle,
    TaskRequest,
    TransitionResult,
)
from .pricing import PriceQuote, PricingCalculator

__all__ = [
    "CustomerLifecycle",
    "DomainLifecycle",
    "OrderAction",
    "OrderLifecycle",
    "PriceQuote",
    "PricingCalculator",
    "TaskRequest",
    "TransitionResult",
]
