"""Orchestration models - ExecutionContext, TaskResult."""

from dataclasses import dataclass, field
from datetime import datetime

from core.domain.entities import FulfillmentTask
from core.domain.enums import TaskStatus, TaskType
from core.domain.value_objects import ExecutionID


@dataclass
class ExecutionContext:
    """Context object for one task attempt."""

    execution_id: ExecutionID
    task: FulfillmentTask
    started_at: datetime
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def payload(self) -> dict[str, object]:
        return self.task.payload

    @property
    def log_prefix(self) -> str:
        return f"[{self.execution_id}] {self.task.task_type.value}#{self.task.id}"


@dataclass
class TaskResult:
    """Result of one task attempt."""

    task_id: int
    task_type: TaskType
    status: TaskStatus
    attempts: int
    duration_ms: int
    error: str | None = None
    output: object = None

    @property
    def success(self) -> bool:
        return self.status is TaskStatus.SUCCEEDED
