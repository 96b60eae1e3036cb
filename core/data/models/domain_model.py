"""SQLAlchemy ORM model for domains."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hostflow_sdk.utils.datetime import utc_now

from .base import Base


class DomainModel(Base):
    """SQLAlchemy ORM model for domains table."""

    __tablename__ = "domains"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    name = Column(String(253), nullable=False, index=True)
    tld = Column(String(63), nullable=False)
    register = Column(Boolean, nullable=False, default=True)
    status = Column(String(20), nullable=False, default="pending", index=True)

    registration_ref = Column(String(100), nullable=True)
    hosting_subscription_ref = Column(String(100), nullable=True)
    registered_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True, index=True)

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    order = relationship("OrderModel", back_populates="domains")
