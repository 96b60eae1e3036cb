"""Application DTOs."""

from .order_dto import (
    CancelOrderRequest,
    CreateOrderRequest,
    CustomerDTO,
    CustomerInput,
    DomainDTO,
    DomainInput,
    OrderDTO,
    OrderListDTO,
    PackageDTO,
)
from .payment_dto import PaymentCheckout, PaymentEvent, PaymentWebhookRequest, ReconciliationResult
from .task_dto import TaskDTO

__all__ = [
    "CancelOrderRequest",
    "CreateOrderRequest",
    "CustomerDTO",
    "CustomerInput",
    "DomainDTO",
    "DomainInput",
    "OrderDTO",
    "OrderListDTO",
    "PackageDTO",
    "PaymentCheckout",
    "PaymentEvent",
    "PaymentWebhookRequest",
    "ReconciliationResult",
    "TaskDTO",
]
