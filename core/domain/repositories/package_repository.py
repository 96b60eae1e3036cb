"""Repository interface for the hosting package catalog."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities import HostingPackage


class PackageRepository(ABC):
    """Read access to the catalog (plus inserts for seeding)."""

    @abstractmethod
    async def find_active_by_id(self, package_id: int) -> Optional[HostingPackage]:
        pass

    @abstractmethod
    async def list_active(self) -> List[HostingPackage]:
        pass

    @abstractmethod
    async def add(self, package: HostingPackage) -> HostingPackage:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
