"""Fulfillment task enums."""
from enum import Enum


class TaskType(str, Enum):
    """Side-effecting operations the fulfillment coordinator runs."""

    SYNC_ACCOUNTING_CONTACT = "sync_accounting_contact"
    PROVISION_HOSTING = "provision_hosting"
    REGISTER_DOMAIN = "register_domain"
    CREATE_INVOICE = "create_invoice"
    SUSPEND_HOSTING = "suspend_hosting"
    REACTIVATE_HOSTING = "reactivate_hosting"


class TaskStatus(str, Enum):
    """Task record states."""

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
