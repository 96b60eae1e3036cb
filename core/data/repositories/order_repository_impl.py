"""SQLAlchemy implementation of OrderRepository."""

from datetime import datetime, timedelta
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.domain.entities import Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import ConflictError
from core.domain.repositories import OrderRepository
from hostflow_sdk.utils.datetime import utc_now

from ..mappers import OrderMapper
from ..models import OrderModel


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    def _hydrated(self):
        return (
            select(OrderModel)
            .options(
                selectinload(OrderModel.customer),
                selectinload(OrderModel.package),
                selectinload(OrderModel.domains),
            )
            .execution_options(populate_existing=True)
        )

    async def add(self, order: Order) -> Order:
        """Insert order and domains, then return the hydrated aggregate."""
        model = OrderMapper.to_persistence(order)
        self._session.add(model)
        await self._session.flush()  # Assign ids without committing
        return await self.find_by_id(model.id)

    async def find_by_id(self, order_id: int) -> Optional[Order]:
        result = await self._session.execute(self._hydrated().where(OrderModel.id == order_id))
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def find_by_order_number(self, order_number: str) -> Optional[Order]:
        result = await self._session.execute(
            self._hydrated().where(OrderModel.order_number == order_number)
        )
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def exists_order_number(self, order_number: str) -> bool:
        result = await self._session.execute(
            select(OrderModel.id).where(OrderModel.order_number == order_number)
        )
        return result.scalar_one_or_none() is not None

    async def find_all(
        self, status: Optional[OrderStatus] = None, limit: int = 100, offset: int = 0
    ) -> List[Order]:
        """List orders with pagination, newest first.

        Args:
            status: Optional status filter
            limit: Maximum number of orders to return
            offset: Number of orders to skip

        Returns:
            List of Order aggregates
        """
        stmt = self._hydrated().order_by(OrderModel.id.desc()).limit(limit).offset(offset)
        if status is not None:
            stmt = stmt.where(OrderModel.status == status.value)
        result = await self._session.execute(stmt)
        return [OrderMapper.to_domain(m) for m in result.scalars().all()]

    async def transition(
        self, order_id: int, expected: OrderStatus, new: OrderStatus, **fields: Any
    ) -> None:
        """Compare-and-swap the order status in a single UPDATE.

        Raises:
            ConflictError: If no row matched (status changed underneath us)
        """
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == expected.value)
            .values(status=new.value, updated_at=utc_now(), **fields)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount != 1:
            raise ConflictError("order", order_id, expected.value)

    async def set_payment_ref(self, order_id: int, payment_ref: str) -> None:
        await self._session.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(payment_ref=payment_ref, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )

    async def set_invoice_ref(self, order_id: int, invoice_ref: str) -> bool:
        result = await self._session.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.external_invoice_ref.is_(None))
            .values(external_invoice_ref=invoice_ref, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def find_due_for_invoicing(self, now: datetime, days_ahead: int = 7) -> List[Order]:
        """Active orders billing within the window that have no invoice yet.

        Args:
            now: Reference time
            days_ahead: Window size in days

        Returns:
            Orders ordered by next billing date
        """
        stmt = (
            self._hydrated()
            .where(
                OrderModel.status == OrderStatus.ACTIVE.value,
                OrderModel.next_billing_date.is_not(None),
                OrderModel.next_billing_date <= now + timedelta(days=days_ahead),
                OrderModel.external_invoice_ref.is_(None),
            )
            .order_by(OrderModel.next_billing_date)
        )
        result = await self._session.execute(stmt)
        return [OrderMapper.to_domain(m) for m in result.scalars().all()]
