"""Payment provider webhooks."""
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_payment_service
from core.application.dtos import PaymentWebhookRequest, ReconciliationResult
from core.application.services import PaymentReconciliationService


logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/payments", response_model=ReconciliationResult, summary="Payment status webhook")
async def payment_webhook(
    body: PaymentWebhookRequest,
    service: PaymentReconciliationService = Depends(get_payment_service),
):
    """
    Mollie only posts the payment id; the current status is fetched from
    the provider. Duplicate deliveries are answered 200 with `applied=false`.
    """
    return await service.handle_webhook(body.id)
