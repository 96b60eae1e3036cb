"""SQLAlchemy ORM model for the Order aggregate."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from hostflow_sdk.utils.datetime import utc_now

from .base import Base


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(32), nullable=False, unique=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    hosting_package_id = Column(Integer, ForeignKey("hosting_packages.id"), nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    billing_cycle = Column(String(20), nullable=False)

    # Fixed at creation
    subtotal = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")

    payment_ref = Column(String(100), nullable=True, index=True)
    external_invoice_ref = Column(String(100), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Milestones
    paid_at = Column(DateTime, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    provisioned_at = Column(DateTime, nullable=True)
    activated_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    next_billing_date = Column(DateTime, nullable=True, index=True)

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    customer = relationship("CustomerModel")
    package = relationship("HostingPackageModel")
    domains = relationship(
        "DomainModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="DomainModel.id",
    )
