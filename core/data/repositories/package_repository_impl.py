"""SQLAlchemy implementation of PackageRepository."""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import HostingPackage
from core.domain.repositories import PackageRepository

from ..mappers import PackageMapper
from ..models import HostingPackageModel


class SqlAlchemyPackageRepository(PackageRepository):
    """Concrete implementation of PackageRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_active_by_id(self, package_id: int) -> Optional[HostingPackage]:
        result = await self._session.execute(
            select(HostingPackageModel).where(
                HostingPackageModel.id == package_id,
                HostingPackageModel.active.is_(True),
            )
        )
        model = result.scalar_one_or_none()
        return PackageMapper.to_domain(model) if model else None

    async def list_active(self) -> List[HostingPackage]:
        result = await self._session.execute(
            select(HostingPackageModel)
            .where(HostingPackageModel.active.is_(True))
            .order_by(HostingPackageModel.price_monthly)
        )
        return [PackageMapper.to_domain(m) for m in result.scalars().all()]

    async def add(self, package: HostingPackage) -> HostingPackage:
        model = PackageMapper.to_persistence(package)
        self._session.add(model)
        await self._session.flush()
        return PackageMapper.to_domain(model)

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(HostingPackageModel.id)))
        return result.scalar_one()
