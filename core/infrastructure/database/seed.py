"""Default hosting package catalog."""
import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.data.uow import create_uow
from core.domain.entities import HostingPackage


logger = logging.getLogger(__name__)


DEFAULT_PACKAGES = [
    HostingPackage(
        name="Startup",
        description="Small sites and landing pages",
        price_monthly=Decimal("19.99"),
        price_yearly=Decimal("14.99"),
        disk_space_mb=5_000,
        bandwidth_gb=50,
        email_accounts=5,
        databases=1,
        domains=1,
        subdomains=5,
    ),
    HostingPackage(
        name="Plus",
        description="Growing businesses with several sites",
        price_monthly=Decimal("39.99"),
        price_yearly=Decimal("34.99"),
        disk_space_mb=20_000,
        bandwidth_gb=200,
        email_accounts=25,
        databases=5,
        domains=5,
        subdomains=25,
    ),
    HostingPackage(
        name="Premium",
        description="High-traffic shops and agencies",
        price_monthly=Decimal("79.99"),
        price_yearly=Decimal("74.99"),
        disk_space_mb=100_000,
        bandwidth_gb=1_000,
        email_accounts=100,
        databases=25,
        domains=25,
        subdomains=100,
    ),
]


async def seed_packages(session_factory: async_sessionmaker) -> int:
    """Insert the default catalog when the package table is empty.

    Returns:
        Number of packages inserted
    """
    async with create_uow(session_factory) as uow:
        if await uow.packages.count() > 0:
            return 0
        for package in DEFAULT_PACKAGES:
            await uow.packages.add(package)
        await uow.commit()

    logger.info(f"✅ Seeded {len(DEFAULT_PACKAGES)} hosting packages")
    return len(DEFAULT_PACKAGES)
