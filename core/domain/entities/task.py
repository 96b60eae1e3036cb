"""Fulfillment task record."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..enums import TaskStatus, TaskType


@dataclass
class FulfillmentTask:
    """
    One retryable unit of fulfillment work.

    `attempts` counts started executions; a task is rescheduled after a
    failure while `attempts < max_attempts`.
    """
    task_type: TaskType
    order_id: int
    domain_id: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    status: TaskStatus = TaskStatus.QUEUED
    attempts: int = 0
    max_attempts: int = 3
    backoff_seconds: int = 60
    last_error: Optional[str] = None
    next_run_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def has_attempts_left(self) -> bool:
        return self.attempts < self.max_attempts
