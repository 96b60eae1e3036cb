"""Repository interface for the Order aggregate."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional

from ..entities import Order
from ..enums import OrderStatus


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Insert a new order (and its domains), assigning ids.

        Args:
            order: Order aggregate with `domains` populated

        Returns:
            The same aggregate with ids set
        """

    @abstractmethod
    async def find_by_id(self, order_id: int) -> Optional[Order]:
        """Retrieve a hydrated order by primary key."""

    @abstractmethod
    async def find_by_order_number(self, order_number: str) -> Optional[Order]:
        """Retrieve a hydrated order by its human-readable number."""

    @abstractmethod
    async def exists_order_number(self, order_number: str) -> bool:
        """Check whether an order number is already taken."""

    @abstractmethod
    async def find_all(
        self, status: Optional[OrderStatus] = None, limit: int = 100, offset: int = 0
    ) -> List[Order]:
        """List orders, newest first."""

    @abstractmethod
    async def transition(
        self, order_id: int, expected: OrderStatus, new: OrderStatus, **fields: Any
    ) -> None:
        """Compare-and-swap the order status and write `fields` in the same update.

        Raises:
            ConflictError: If the stored status is not `expected`
        """

    @abstractmethod
    async def set_payment_ref(self, order_id: int, payment_ref: str) -> None:
        """Record the provider payment id for an order."""

    @abstractmethod
    async def set_invoice_ref(self, order_id: int, invoice_ref: str) -> bool:
        """Set `external_invoice_ref` if still empty.

        Returns:
            True if this call set the reference
        """

    @abstractmethod
    async def find_due_for_invoicing(self, now: datetime, days_ahead: int = 7) -> List[Order]:
        """Active orders billing within `days_ahead` days with no invoice reference."""
