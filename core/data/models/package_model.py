"""SQLAlchemy ORM model for the hosting package catalog."""

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from hostflow_sdk.utils.datetime import utc_now

from .base import Base


class HostingPackageModel(Base):
    """SQLAlchemy ORM model for hosting_packages table."""

    __tablename__ = "hosting_packages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price_monthly = Column(Numeric(10, 2), nullable=False)
    price_quarterly = Column(Numeric(10, 2), nullable=True)
    price_yearly = Column(Numeric(10, 2), nullable=False)
    disk_space_mb = Column(Integer, nullable=False, default=0)
    bandwidth_gb = Column(Integer, nullable=False, default=0)
    email_accounts = Column(Integer, nullable=False, default=0)
    databases = Column(Integer, nullable=False, default=0)
    domains = Column(Integer, nullable=False, default=1)
    subdomains = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utc_now)
