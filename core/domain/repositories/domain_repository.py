"""Repository interface for domains."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional

from ..entities import Domain
from ..enums import DomainStatus


class DomainRepository(ABC):
    """Abstract repository for Domain persistence."""

    @abstractmethod
    async def find_by_id(self, domain_id: int) -> Optional[Domain]:
        pass

    @abstractmethod
    async def list_for_order(self, order_id: int) -> List[Domain]:
        pass

    @abstractmethod
    async def is_name_taken(self, name: str) -> bool:
        """True if a non-cancelled domain row already holds `name`."""

    @abstractmethod
    async def transition(
        self, domain_id: int, expected: DomainStatus, new: DomainStatus, **fields: Any
    ) -> None:
        """Compare-and-swap the domain status.

        Raises:
            ConflictError: If the stored status is not `expected`
        """

    @abstractmethod
    async def cancel_all_for_order(self, order_id: int) -> int:
        """Move every non-cancelled domain of an order to cancelled. Returns the row count."""

    @abstractmethod
    async def set_subscription_ref(self, domain_id: int, ref: str) -> bool:
        """Set the hosting subscription ref if still empty. True if this call set it."""

    @abstractmethod
    async def record_registration(
        self, domain_id: int, registration_ref: str, registered_at: datetime, expires_at: datetime
    ) -> bool:
        """Store registration details without touching the status, if no ref is set yet."""

    @abstractmethod
    async def find_expiring_soon(self, now: datetime, days: int = 30) -> List[Domain]:
        """Registered/active domains expiring within `days` days."""
