"""SQLAlchemy ORM model for customers."""

from sqlalchemy import Column, DateTime, Integer, String

from hostflow_sdk.utils.datetime import utc_now

from .base import Base


class CustomerModel(Base):
    """SQLAlchemy ORM model for customers table."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(255), nullable=True)
    postal_code = Column(String(20), nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(2), nullable=False, default="NL")
    vat_number = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)

    # External references, written once by the sync tasks
    hosting_account_ref = Column(String(100), nullable=True, index=True)
    accounting_contact_ref = Column(String(100), nullable=True, index=True)

    approved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
