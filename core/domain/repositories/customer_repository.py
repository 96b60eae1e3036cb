"""Repository interface for customers."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..entities import Customer
from ..enums import CustomerStatus


class CustomerRepository(ABC):
    """Abstract repository for Customer persistence."""

    @abstractmethod
    async def add(self, customer: Customer) -> Customer:
        """Insert a customer and return it with its id."""

    @abstractmethod
    async def find_by_id(self, customer_id: int) -> Optional[Customer]:
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Customer]:
        """Exact (lower-cased) e-mail match; first match wins."""

    @abstractmethod
    async def transition(
        self, customer_id: int, expected: CustomerStatus, new: CustomerStatus, **fields: Any
    ) -> None:
        """Compare-and-swap the customer status.

        Raises:
            ConflictError: If the stored status is not `expected`
        """

    @abstractmethod
    async def set_hosting_account_ref(self, customer_id: int, ref: str) -> bool:
        """Set the hosting panel account ref if still empty. True if this call set it."""

    @abstractmethod
    async def set_accounting_contact_ref(self, customer_id: int, ref: str) -> bool:
        """Set the accounting contact ref if still empty. True if this call set it."""
