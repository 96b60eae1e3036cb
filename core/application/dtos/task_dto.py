"""DTOs for fulfillment task records."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from core.domain.entities import FulfillmentTask


class TaskDTO(BaseModel):
    """Inspectable view of a fulfillment task."""

    id: int
    task_type: str
    order_id: int
    domain_id: Optional[int] = None
    payload: Dict[str, Any]
    status: str
    attempts: int
    max_attempts: int
    backoff_seconds: int
    last_error: Optional[str] = None
    next_run_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, task: FulfillmentTask) -> "TaskDTO":
        return cls(
            id=task.id,
            task_type=task.task_type.value,
            order_id=task.order_id,
            domain_id=task.domain_id,
            payload=task.payload,
            status=task.status.value,
            attempts=task.attempts,
            max_attempts=task.max_attempts,
            backoff_seconds=task.backoff_seconds,
            last_error=task.last_error,
            next_run_at=task.next_run_at,
            started_at=task.started_at,
            finished_at=task.finished_at,
        )
