"""SQLAlchemy ORM model for fulfillment task records."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from hostflow_sdk.utils.datetime import utc_now

from .base import Base


class FulfillmentTaskModel(Base):
    """SQLAlchemy ORM model for fulfillment_tasks table (the durable queue)."""

    __tablename__ = "fulfillment_tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_type = Column(String(50), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    domain_id = Column(Integer, ForeignKey("domains.id"), nullable=True)
    payload = Column(JSON, nullable=False, default=dict)

    status = Column(String(20), nullable=False, default="queued", index=True)
    attempts = Column(Integer, nullable=False, default=0)
    max_attempts = Column(Integer, nullable=False, default=3)
    backoff_seconds = Column(Integer, nullable=False, default=60)
    last_error = Column(Text, nullable=True)
    next_run_at = Column(DateTime, nullable=False, default=utc_now, index=True)

    started_at = Column(DateTime, nullable=True)
    finished_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
