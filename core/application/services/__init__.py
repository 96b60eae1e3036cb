"""Application services."""

from .customer_service import CustomerApplicationService
from .lifecycle_service import OrderLifecycleService
from .order_service import OrderApplicationService
from .order_transitions import apply_order_transition, publish_transition
from .payment_service import PaymentReconciliationService

__all__ = [
    "CustomerApplicationService",
    "OrderApplicationService",
    "OrderLifecycleService",
    "PaymentReconciliationService",
    "apply_order_transition",
    "publish_transition",
]
