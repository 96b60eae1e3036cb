"""Fulfillment use cases, one per task type."""

from .base import FulfillmentUseCase
from .create_invoice import CreateInvoiceUseCase
from .manage_hosting import ReactivateHostingUseCase, SuspendHostingUseCase
from .provision_hosting import ProvisionHostingUseCase
from .register_domain import RegisterDomainUseCase
from .sync_accounting_contact import SyncAccountingContactUseCase

__all__ = [
    "CreateInvoiceUseCase",
    "FulfillmentUseCase",
    "ProvisionHostingUseCase",
    "ReactivateHostingUseCase",
    "RegisterDomainUseCase",
    "SuspendHostingUseCase",
    "SyncAccountingContactUseCase",
]
