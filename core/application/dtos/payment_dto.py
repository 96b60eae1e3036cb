"""DTOs for payment reconciliation."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

PaymentStatus = Literal["open", "pending", "authorized", "paid", "failed", "expired", "canceled"]


class PaymentEvent(BaseModel):
    """Provider-reported payment state, correlated to an order via metadata."""

    payment_ref: str
    status: PaymentStatus
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def order_id(self) -> Optional[int]:
        raw = self.metadata.get("order_id")
        try:
            return int(raw) if raw is not None else None
        except (TypeError, ValueError):
            return None


class PaymentCheckout(BaseModel):
    """A freshly created provider payment."""

    payment_ref: str
    checkout_url: Optional[str] = None
    status: PaymentStatus = "open"

    model_config = {"frozen": True}


class PaymentWebhookRequest(BaseModel):
    """Webhook body: the provider only sends the payment id."""

    id: str = Field(..., min_length=1, description="Provider payment id")


class ReconciliationResult(BaseModel):
    """What a payment event did to its order."""

    payment_ref: str
    order_id: Optional[int] = None
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    applied: bool = False
    reason: Optional[str] = None

    model_config = {"frozen": True}
