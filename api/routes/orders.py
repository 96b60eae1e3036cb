"""
Order endpoints.

Customers place orders and start payments here; everything after that is
driven by payment webhooks and the admin endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_order_service, get_payment_service
from core.application.dtos import CreateOrderRequest, OrderDTO, OrderListDTO, PaymentCheckout
from core.application.services import OrderApplicationService, PaymentReconciliationService
from core.domain.enums import OrderStatus


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# CREATE ORDER
# =============================================================================

@router.post(
    "",
    response_model=OrderDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
)
async def create_order(
    request: CreateOrderRequest,
    service: OrderApplicationService = Depends(get_order_service),
):
    """
    Create a pending order for a hosting package and one or more domains.

    Subtotal, tax and total are fixed here and never recomputed.
    """
    return await service.create_order(request)


# =============================================================================
# LIST / GET ORDERS
# =============================================================================

@router.get("", response_model=OrderListDTO, summary="List orders")
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of orders to return"),
    offset: int = Query(default=0, ge=0, description="Number of orders to skip"),
    service: OrderApplicationService = Depends(get_order_service),
):
    return await service.list_orders(status=status_filter, limit=limit, offset=offset)


@router.get("/{order_number}", response_model=OrderDTO, summary="Get an order")
async def get_order(
    order_number: str,
    service: OrderApplicationService = Depends(get_order_service),
):
    order = await service.get_order(order_number)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order {order_number} not found",
        )
    return order


# =============================================================================
# PAYMENTS
# =============================================================================

@router.post(
    "/{order_number}/payments",
    response_model=PaymentCheckout,
    status_code=status.HTTP_201_CREATED,
    summary="Start a payment for a pending order",
)
async def start_payment(
    order_number: str,
    service: PaymentReconciliationService = Depends(get_payment_service),
):
    return await service.start_payment(order_number)
