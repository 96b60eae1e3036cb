"""SQLAlchemy repository implementations."""

from .customer_repository_impl import SqlAlchemyCustomerRepository
from .domain_repository_impl import SqlAlchemyDomainRepository
from .order_repository_impl import SqlAlchemyOrderRepository
from .package_repository_impl import SqlAlchemyPackageRepository
from .task_repository_impl import SqlAlchemyTaskRepository

__all__ = [
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyDomainRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyPackageRepository",
    "SqlAlchemyTaskRepository",
]
