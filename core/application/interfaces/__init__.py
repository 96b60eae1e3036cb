"""Application layer interfaces."""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional

from core.application.dtos.payment_dto import PaymentCheckout, PaymentEvent
from core.domain.value_objects import CustomerProfile, ExecutionID, InvoiceLine


class IHostingGateway(ABC):
    """
    Interface for the hosting control panel.

    Every method raises ProviderError on any upstream failure.
    """

    @abstractmethod
    async def create_customer_account(self, profile: CustomerProfile) -> str:
        """
        Create a panel account for a customer.

        Args:
            profile: Customer contact details

        Returns:
            Account reference in the panel
        """

    @abstractmethod
    async def create_subscription(self, account_ref: str, domain_name: str, plan_name: str) -> str:
        """
        Create a hosting subscription (webspace) for a domain.

        Args:
            account_ref: Panel account owning the subscription
            domain_name: Primary domain of the subscription
            plan_name: Service plan, named after the hosting package

        Returns:
            Subscription reference in the panel
        """

    @abstractmethod
    async def suspend_subscription(self, subscription_ref: str) -> None:
        pass

    @abstractmethod
    async def reactivate_subscription(self, subscription_ref: str) -> None:
        pass


class IRegistrarGateway(ABC):
    """Interface for the domain registrar."""

    @abstractmethod
    async def check_availability(self, domain_name: str) -> bool:
        """
        Check if a domain can be registered.

        Returns:
            True if the name is free
        """

    @abstractmethod
    async def register_domain(self, domain_name: str, contact: CustomerProfile, period_years: int) -> str:
        """
        Register a domain.

        Args:
            domain_name: Name to register
            contact: Registrant contact
            period_years: Registration period

        Returns:
            Registration reference at the registrar
        """


class IAccountingGateway(ABC):
    """Interface for the accounting / invoicing system."""

    @abstractmethod
    async def create_contact(self, profile: CustomerProfile) -> str:
        """Create a contact and return its reference."""

    @abstractmethod
    async def create_invoice(self, contact_ref: str, lines: List[InvoiceLine], reference: str) -> str:
        """
        Create an invoice.

        Args:
            contact_ref: Accounting contact the invoice is addressed to
            lines: Invoice line items
            reference: Reference printed on the invoice (the order number)

        Returns:
            Invoice reference
        """


class IPaymentGateway(ABC):
    """Interface for the payment provider (one-off payments)."""

    @abstractmethod
    async def create_payment(
        self,
        amount: Decimal,
        currency: str,
        description: str,
        metadata: Dict[str, Any],
    ) -> PaymentCheckout:
        pass

    @abstractmethod
    async def fetch_payment(self, payment_ref: str) -> PaymentEvent:
        """Fetch the current state of a payment, resolved to a PaymentEvent."""


class INotificationService(ABC):
    """
    Interface for notification service operations.

    This interface defines the contract for sending notifications,
    allowing different implementations (Slack, mock, ...).
    """

    @abstractmethod
    async def send_success(
        self,
        execution_id: ExecutionID,
        reference: str,
        message: str
    ) -> None:
        """
        Send success notification.

        Args:
            execution_id: Execution tracking ID
            reference: Order number or task reference
            message: Success message
        """

    @abstractmethod
    async def send_error(
        self,
        execution_id: ExecutionID,
        reference: str,
        error: str,
        details: Optional[str]
    ) -> None:
        """
        Send error notification.

        Args:
            execution_id: Execution tracking ID
            reference: Order number or task reference
            error: Error message
            details: Additional error details
        """

    @abstractmethod
    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
