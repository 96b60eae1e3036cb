"""SQLAlchemy implementation of DomainRepository."""

from datetime import datetime, timedelta
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Domain
from core.domain.enums import DomainStatus
from core.domain.exceptions import ConflictError
from core.domain.repositories import DomainRepository
from hostflow_sdk.utils.datetime import utc_now

from ..mappers import DomainMapper
from ..models import DomainModel


class SqlAlchemyDomainRepository(DomainRepository):
    """Concrete implementation of DomainRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, domain_id: int) -> Optional[Domain]:
        result = await self._session.execute(
            select(DomainModel)
            .where(DomainModel.id == domain_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return DomainMapper.to_domain(model) if model else None

    async def list_for_order(self, order_id: int) -> List[Domain]:
        result = await self._session.execute(
            select(DomainModel)
            .where(DomainModel.order_id == order_id)
            .order_by(DomainModel.id)
            .execution_options(populate_existing=True)
        )
        return [DomainMapper.to_domain(m) for m in result.scalars().all()]

    async def is_name_taken(self, name: str) -> bool:
        result = await self._session.execute(
            select(DomainModel.id)
            .where(
                DomainModel.name == name,
                DomainModel.status != DomainStatus.CANCELLED.value,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def transition(
        self, domain_id: int, expected: DomainStatus, new: DomainStatus, **fields: Any
    ) -> None:
        result = await self._session.execute(
            update(DomainModel)
            .where(DomainModel.id == domain_id, DomainModel.status == expected.value)
            .values(status=new.value, updated_at=utc_now(), **fields)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError("domain", domain_id, expected.value)

    async def cancel_all_for_order(self, order_id: int) -> int:
        result = await self._session.execute(
            update(DomainModel)
            .where(
                DomainModel.order_id == order_id,
                DomainModel.status != DomainStatus.CANCELLED.value,
            )
            .values(status=DomainStatus.CANCELLED.value, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def set_subscription_ref(self, domain_id: int, ref: str) -> bool:
        result = await self._session.execute(
            update(DomainModel)
            .where(DomainModel.id == domain_id, DomainModel.hosting_subscription_ref.is_(None))
            .values(hosting_subscription_ref=ref, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def record_registration(
        self, domain_id: int, registration_ref: str, registered_at: datetime, expires_at: datetime
    ) -> bool:
        result = await self._session.execute(
            update(DomainModel)
            .where(DomainModel.id == domain_id, DomainModel.registration_ref.is_(None))
            .values(
                registration_ref=registration_ref,
                registered_at=registered_at,
                expires_at=expires_at,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def find_expiring_soon(self, now: datetime, days: int = 30) -> List[Domain]:
        result = await self._session.execute(
            select(DomainModel)
            .where(
                DomainModel.status.in_([DomainStatus.REGISTERED.value, DomainStatus.ACTIVE.value]),
                DomainModel.expires_at.is_not(None),
                DomainModel.expires_at <= now + timedelta(days=days),
            )
            .order_by(DomainModel.expires_at)
        )
        return [DomainMapper.to_domain(m) for m in result.scalars().all()]
