"""Task definitions - RetryPolicy, TaskHandler and the per-task retry table."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from core.domain.enums import OrderStatus, TaskType

from .models import ExecutionContext

if TYPE_CHECKING:
    from core.settings.sections.fulfillment import FulfillmentSettings


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy for a task type: bounded attempts with a fixed backoff."""

    max_attempts: int = 3
    backoff_seconds: int = 60


class TaskHandler(Protocol):
    """A fulfillment use case the coordinator can dispatch."""

    async def execute(self, ctx: ExecutionContext) -> object:
        """Run one attempt. Raising marks the attempt failed."""
        ...

    async def on_permanent_failure(self, ctx: ExecutionContext, error: Exception) -> None:
        """Leave entities in an inspectable state once retries are exhausted."""
        ...


DEFAULT_RETRY_POLICIES: dict[TaskType, RetryPolicy] = {
    TaskType.SYNC_ACCOUNTING_CONTACT: RetryPolicy(max_attempts=3, backoff_seconds=30),
    TaskType.PROVISION_HOSTING: RetryPolicy(max_attempts=3, backoff_seconds=60),
    TaskType.REGISTER_DOMAIN: RetryPolicy(max_attempts=3, backoff_seconds=120),
    TaskType.CREATE_INVOICE: RetryPolicy(max_attempts=3, backoff_seconds=60),
    TaskType.SUSPEND_HOSTING: RetryPolicy(max_attempts=3, backoff_seconds=60),
    TaskType.REACTIVATE_HOSTING: RetryPolicy(max_attempts=3, backoff_seconds=60),
}


_FULFILLING = frozenset({OrderStatus.PROCESSING, OrderStatus.ACTIVE, OrderStatus.SUSPENDED})

# Order statuses a task may run against; anything else is skipped.
# Provisioning only runs while the order is processing (never pending).
RUNNABLE_ORDER_STATUSES: dict[TaskType, frozenset[OrderStatus]] = {
    TaskType.SYNC_ACCOUNTING_CONTACT: _FULFILLING,
    TaskType.PROVISION_HOSTING: frozenset({OrderStatus.PROCESSING}),
    TaskType.REGISTER_DOMAIN: _FULFILLING,
    TaskType.CREATE_INVOICE: _FULFILLING,
    TaskType.SUSPEND_HOSTING: frozenset({OrderStatus.SUSPENDED}),
    TaskType.REACTIVATE_HOSTING: frozenset({OrderStatus.ACTIVE}),
}


def retry_policies_from_settings(settings: "FulfillmentSettings") -> dict[TaskType, RetryPolicy]:
    """Build the retry table from configuration.

    Args:
        settings: FulfillmentSettings section

    Returns:
        Mapping of task type to RetryPolicy
    """
    attempts = settings.max_attempts
    return {
        TaskType.SYNC_ACCOUNTING_CONTACT: RetryPolicy(attempts, settings.sync_backoff_seconds),
        TaskType.PROVISION_HOSTING: RetryPolicy(attempts, settings.provisioning_backoff_seconds),
        TaskType.REGISTER_DOMAIN: RetryPolicy(attempts, settings.registration_backoff_seconds),
        TaskType.CREATE_INVOICE: RetryPolicy(attempts, settings.invoicing_backoff_seconds),
        TaskType.SUSPEND_HOSTING: RetryPolicy(attempts, settings.hosting_status_backoff_seconds),
        TaskType.REACTIVATE_HOSTING: RetryPolicy(attempts, settings.hosting_status_backoff_seconds),
    }
