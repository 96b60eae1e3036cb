"""
Payment Reconciliation Service.

Maps provider-reported payment status onto order status:
- paid             → order paid (then approved, when auto-approval is on)
- failed / expired → order failed
- canceled         → order cancelled (domains cascade)
- anything else    → no change

Only `pending` orders are eligible. Duplicate or late deliveries find the
order already past `pending` and are reported as not applied.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import PaymentCheckout, PaymentEvent, ReconciliationResult
from core.application.interfaces import IPaymentGateway
from core.data.uow import create_uow
from core.domain.entities import Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import ConflictError, IllegalTransition, NotFound
from core.domain.services import OrderLifecycle, TransitionResult
from hostflow_sdk.utils.datetime import utc_now
from orchestration.bus import EventBusProtocol

from .lifecycle_service import OrderLifecycleService
from .order_transitions import apply_order_transition, publish_transition


logger = logging.getLogger(__name__)


class PaymentReconciliationService:
    """Starts one-off payments and reconciles their outcome with orders."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        payments: IPaymentGateway,
        lifecycle_service: Optional[OrderLifecycleService] = None,
        event_bus: Optional[EventBusProtocol] = None,
        auto_approve: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._payments = payments
        self._lifecycle_service = lifecycle_service
        self._event_bus = event_bus
        self._auto_approve = auto_approve
        self._clock = clock
        self._lifecycle = OrderLifecycle()

    async def start_payment(self, order_number: str) -> PaymentCheckout:
        """Create a provider payment for the order total and remember its reference.

        Raises:
            NotFound: Unknown order
            IllegalTransition: Order is not pending
        """
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_order_number(order_number)
        if order is None:
            raise NotFound("order", order_number)
        if order.status is not OrderStatus.PENDING:
            raise IllegalTransition("order", order.status.value, "start a payment for")

        checkout = await self._payments.create_payment(
            amount=order.total.amount,
            currency=order.total.currency,
            description=f"Order {order.order_number}",
            metadata={"order_id": order.id, "order_number": order.order_number.value},
        )

        async with create_uow(self._session_factory) as uow:
            await uow.orders.set_payment_ref(order.id, checkout.payment_ref)
            await uow.commit()

        logger.info(f"payment {checkout.payment_ref} started for order {order.order_number}")
        return checkout

    async def handle_webhook(self, payment_ref: str) -> ReconciliationResult:
        """Fetch the payment's current state from the provider and reconcile it."""
        event = await self._payments.fetch_payment(payment_ref)
        return await self.reconcile(event)

    async def reconcile(self, event: PaymentEvent) -> ReconciliationResult:
        """Apply a payment event to its order, at most once.

        Returns:
            ReconciliationResult; `applied` is False for duplicates, unknown
            orders and statuses that do not move the order
        """
        order_id = event.order_id
        if order_id is None:
            logger.warning(f"payment {event.payment_ref} carries no order_id; ignored")
            return ReconciliationResult(payment_ref=event.payment_ref, reason="missing order_id")

        now = self._clock()
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(order_id)
            if order is None:
                logger.warning(f"payment {event.payment_ref} refers to unknown order {order_id}")
                return ReconciliationResult(
                    payment_ref=event.payment_ref, order_id=order_id, reason="order not found"
                )

            skipped = self._skip_reason(order, event)
            if skipped:
                logger.info(f"[{uow.execution_id}] payment {event.payment_ref} for {order.order_number}: {skipped}")
                return ReconciliationResult(
                    payment_ref=event.payment_ref,
                    order_id=order.id,
                    previous_status=order.status.value,
                    new_status=order.status.value,
                    reason=skipped,
                )

            result = self._decide(order, event, now)
            try:
                await apply_order_transition(uow, result)
            except ConflictError:
                logger.info(
                    f"[{uow.execution_id}] order {order.order_number} left pending concurrently; "
                    f"payment {event.payment_ref} not applied"
                )
                return ReconciliationResult(
                    payment_ref=event.payment_ref,
                    order_id=order.id,
                    previous_status=order.status.value,
                    reason="order is no longer pending",
                )
            await uow.commit()
            execution_id = uow.execution_id

        logger.info(
            f"[{execution_id}] payment {event.payment_ref} ({event.status}): order "
            f"{order.order_number} {result.from_status.value} → {result.to_status.value}"
        )
        await publish_transition(
            self._event_bus, execution_id, order, result, payment_ref=event.payment_ref
        )

        new_status = result.to_status
        if new_status is OrderStatus.PAID and self._auto_approve and self._lifecycle_service:
            try:
                approved = await self._lifecycle_service.approve_order_id(order.id)
                new_status = OrderStatus(approved.status)
            except (ConflictError, IllegalTransition) as exc:
                logger.warning(f"auto-approval of order {order.order_number} skipped: {exc}")

        return ReconciliationResult(
            payment_ref=event.payment_ref,
            order_id=order.id,
            previous_status=result.from_status.value,
            new_status=new_status.value,
            applied=True,
        )

    @staticmethod
    def _skip_reason(order: Order, event: PaymentEvent) -> Optional[str]:
        if order.status is not OrderStatus.PENDING:
            return f"order already {order.status.value}"
        if event.status not in ("paid", "failed", "expired", "canceled"):
            return f"payment still {event.status}"
        return None

    def _decide(self, order: Order, event: PaymentEvent, now: datetime) -> TransitionResult:
        if event.status == "paid":
            return self._lifecycle.confirm_payment(order, now, payment_ref=event.payment_ref)
        if event.status == "canceled":
            return self._lifecycle.cancel(order, now, reason="Payment canceled")
        return self._lifecycle.fail_payment(order, now)
