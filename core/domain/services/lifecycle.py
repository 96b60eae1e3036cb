"""
Order, domain and customer lifecycle state machines.

`OrderLifecycle` is the only place that decides whether a status change is
legal. It never writes anything: each transition returns a
`TransitionResult` describing the compare-and-swap to perform (expected
status, new status, columns to set) and the fulfillment tasks the change
produces. The application layer persists both in one transaction.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from hostflow_sdk.utils.datetime import add_months

from ..entities import Customer, Order
from ..enums import CustomerStatus, DomainStatus, OrderStatus, TaskType
from ..exceptions import IllegalTransition


class OrderAction(str, Enum):
    """Events that move an order between statuses."""

    CONFIRM_PAYMENT = "confirm_payment"
    FAIL_PAYMENT = "fail_payment"
    APPROVE = "approve"
    COMPLETE_PROVISIONING = "complete_provisioning"
    REVERT_PROVISIONING = "revert_provisioning"
    SUSPEND = "suspend"
    REACTIVATE = "reactivate"
    CANCEL = "cancel"


ORDER_TRANSITIONS: Dict[OrderAction, Dict[OrderStatus, OrderStatus]] = {
    OrderAction.CONFIRM_PAYMENT: {OrderStatus.PENDING: OrderStatus.PAID},
    OrderAction.FAIL_PAYMENT: {OrderStatus.PENDING: OrderStatus.FAILED},
    OrderAction.APPROVE: {
        OrderStatus.PENDING: OrderStatus.PROCESSING,
        OrderStatus.PAID: OrderStatus.PROCESSING,
    },
    OrderAction.COMPLETE_PROVISIONING: {OrderStatus.PROCESSING: OrderStatus.ACTIVE},
    OrderAction.REVERT_PROVISIONING: {OrderStatus.PROCESSING: OrderStatus.PENDING},
    OrderAction.SUSPEND: {OrderStatus.ACTIVE: OrderStatus.SUSPENDED},
    OrderAction.REACTIVATE: {OrderStatus.SUSPENDED: OrderStatus.ACTIVE},
    OrderAction.CANCEL: {
        status: OrderStatus.CANCELLED
        for status in OrderStatus
        if status is not OrderStatus.CANCELLED
    },
}

DOMAIN_TRANSITIONS: Dict[DomainStatus, FrozenSet[DomainStatus]] = {
    DomainStatus.PENDING: frozenset({
        DomainStatus.REGISTERED,
        DomainStatus.ACTIVE,
        DomainStatus.UNAVAILABLE,
        DomainStatus.FAILED,
        DomainStatus.CANCELLED,
    }),
    DomainStatus.REGISTERED: frozenset({
        DomainStatus.ACTIVE,
        DomainStatus.FAILED,
        DomainStatus.CANCELLED,
    }),
    DomainStatus.ACTIVE: frozenset({DomainStatus.CANCELLED}),
    DomainStatus.FAILED: frozenset({DomainStatus.PENDING, DomainStatus.CANCELLED}),
    DomainStatus.UNAVAILABLE: frozenset({DomainStatus.CANCELLED}),
    DomainStatus.CANCELLED: frozenset(),
}

CUSTOMER_TRANSITIONS: Dict[str, Dict[CustomerStatus, CustomerStatus]] = {
    "approve": {
        CustomerStatus.PENDING: CustomerStatus.APPROVED,
        CustomerStatus.SUSPENDED: CustomerStatus.APPROVED,
    },
    "reject": {CustomerStatus.PENDING: CustomerStatus.REJECTED},
    "suspend": {CustomerStatus.APPROVED: CustomerStatus.SUSPENDED},
}


@dataclass(frozen=True)
class TaskRequest:
    """A fulfillment task a transition asks the coordinator to run."""
    task_type: TaskType
    payload: Dict[str, Any]
    domain_id: Optional[int] = None


@dataclass
class TransitionResult:
    """Outcome of a legal order transition, not yet persisted."""
    order_id: int
    from_status: OrderStatus
    to_status: OrderStatus
    event_name: str
    fields: Dict[str, Any] = field(default_factory=dict)
    tasks: List[TaskRequest] = field(default_factory=list)
    cascade_domains_to: Optional[DomainStatus] = None


class OrderLifecycle:
    """State machine for orders."""

    @staticmethod
    def can(current: OrderStatus, action: OrderAction) -> bool:
        return current in ORDER_TRANSITIONS[action]

    @staticmethod
    def target(current: OrderStatus, action: OrderAction) -> OrderStatus:
        """
        Resolve the status an action leads to.

        Raises:
            IllegalTransition: If the action is not allowed from `current`
        """
        try:
            return ORDER_TRANSITIONS[action][current]
        except KeyError:
            raise IllegalTransition("order", current.value, action.value) from None

    def _result(
        self, order: Order, action: OrderAction, event_name: str, **fields: Any
    ) -> TransitionResult:
        return TransitionResult(
            order_id=order.id,
            from_status=order.status,
            to_status=self.target(order.status, action),
            event_name=event_name,
            fields=fields,
        )

    def confirm_payment(self, order: Order, now: datetime, payment_ref: Optional[str] = None) -> TransitionResult:
        """pending -> paid; records the payment time."""
        result = self._result(order, OrderAction.CONFIRM_PAYMENT, "order.paid", paid_at=now)
        if payment_ref:
            result.fields["payment_ref"] = payment_ref
        return result

    def fail_payment(self, order: Order, now: datetime) -> TransitionResult:
        """pending -> failed (payment failed or expired)."""
        return self._result(order, OrderAction.FAIL_PAYMENT, "order.payment_failed")

    def approve(self, order: Order, now: datetime) -> TransitionResult:
        """
        pending|paid -> processing and the fulfillment task list.

        Tasks: accounting contact sync, hosting provisioning (only when the
        order has a package), one registration per domain flagged for
        registration, and invoicing. `approved_at` keeps its first value
        when an order is re-approved after a provisioning rollback.
        """
        result = self._result(order, OrderAction.APPROVE, "order.approved")
        if order.approved_at is None:
            result.fields["approved_at"] = now

        base = {"order_id": order.id, "customer_id": order.customer_id}
        result.tasks.append(TaskRequest(TaskType.SYNC_ACCOUNTING_CONTACT, dict(base)))
        if order.hosting_package_id is not None:
            result.tasks.append(TaskRequest(TaskType.PROVISION_HOSTING, dict(base)))
        for domain in order.domains_to_register():
            result.tasks.append(
                TaskRequest(
                    TaskType.REGISTER_DOMAIN,
                    {**base, "domain_id": domain.id, "domain_name": domain.name},
                    domain_id=domain.id,
                )
            )
        result.tasks.append(TaskRequest(TaskType.CREATE_INVOICE, dict(base)))
        return result

    def complete_provisioning(self, order: Order, now: datetime) -> TransitionResult:
        """processing -> active; records provisioning/activation and the next billing date."""
        result = self._result(order, OrderAction.COMPLETE_PROVISIONING, "order.activated")
        if order.provisioned_at is None:
            result.fields["provisioned_at"] = now
        if order.activated_at is None:
            result.fields["activated_at"] = now
            result.fields["next_billing_date"] = add_months(now, order.billing_cycle.months)
        return result

    def revert_provisioning(self, order: Order, now: datetime) -> TransitionResult:
        """processing -> pending after provisioning exhausted its retries."""
        return self._result(order, OrderAction.REVERT_PROVISIONING, "order.provisioning_reverted")

    def suspend(self, order: Order, now: datetime) -> TransitionResult:
        """active -> suspended; suspends every hosted subscription."""
        result = self._result(order, OrderAction.SUSPEND, "order.suspended")
        result.tasks.extend(self._hosting_tasks(order, TaskType.SUSPEND_HOSTING))
        return result

    def reactivate(self, order: Order, now: datetime) -> TransitionResult:
        """suspended -> active; reactivates every hosted subscription."""
        result = self._result(order, OrderAction.REACTIVATE, "order.reactivated")
        result.tasks.extend(self._hosting_tasks(order, TaskType.REACTIVATE_HOSTING))
        return result

    def cancel(self, order: Order, now: datetime, reason: Optional[str] = None) -> Optional[TransitionResult]:
        """
        Any non-cancelled status -> cancelled, cascading to the domains.

        Returns:
            None when the order is already cancelled (no-op)
        """
        if order.status is OrderStatus.CANCELLED:
            return None
        result = self._result(order, OrderAction.CANCEL, "order.cancelled", cancellation_reason=reason)
        if order.cancelled_at is None:
            result.fields["cancelled_at"] = now
        result.cascade_domains_to = DomainStatus.CANCELLED
        return result

    @staticmethod
    def _hosting_tasks(order: Order, task_type: TaskType) -> List[TaskRequest]:
        return [
            TaskRequest(
                task_type,
                {
                    "order_id": order.id,
                    "domain_id": domain.id,
                    "subscription_ref": domain.hosting_subscription_ref,
                },
                domain_id=domain.id,
            )
            for domain in order.domains
            if domain.hosting_subscription_ref
        ]


class DomainLifecycle:
    """State machine for domains."""

    @staticmethod
    def can(current: DomainStatus, new: DomainStatus) -> bool:
        return new in DOMAIN_TRANSITIONS[current]

    @staticmethod
    def ensure(current: DomainStatus, new: DomainStatus) -> None:
        """
        Raises:
            IllegalTransition: If `new` is not reachable from `current`
        """
        if new not in DOMAIN_TRANSITIONS[current]:
            raise IllegalTransition("domain", current.value, f"move to '{new.value}'")


class CustomerLifecycle:
    """State machine for customer accounts."""

    @staticmethod
    def target(customer: Customer, action: str) -> CustomerStatus:
        """
        Raises:
            IllegalTransition: If the action is not allowed from the current status
        """
        try:
            return CUSTOMER_TRANSITIONS[action][customer.status]
        except KeyError:
            raise IllegalTransition("customer", customer.status.value, action) from None
