"""Unit of Work pattern for atomic transactions."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.value_objects import ExecutionID

from .repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyDomainRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyPackageRepository,
    SqlAlchemyTaskRepository,
)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Propagate ExecutionID across all operations
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories

    Nothing is committed unless `commit()` is called; leaving the block
    without committing discards the work.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None
        self._repositories: dict = {}

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        self._repositories = {}
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback anything uncommitted and release the session."""
        if exc_type is not None:
            await self._session.rollback()
        await self._session.close()

    @property
    def execution_id(self) -> ExecutionID:
        """Get current execution ID for tracing.

        Returns:
            ExecutionID value object
        """
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._execution_id

    def _repository(self, name: str, factory):
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        if name not in self._repositories:
            self._repositories[name] = factory(self._session)
        return self._repositories[name]

    @property
    def customers(self) -> SqlAlchemyCustomerRepository:
        return self._repository("customers", SqlAlchemyCustomerRepository)

    @property
    def packages(self) -> SqlAlchemyPackageRepository:
        return self._repository("packages", SqlAlchemyPackageRepository)

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        return self._repository("orders", SqlAlchemyOrderRepository)

    @property
    def domains(self) -> SqlAlchemyDomainRepository:
        return self._repository("domains", SqlAlchemyDomainRepository)

    @property
    def tasks(self) -> SqlAlchemyTaskRepository:
        return self._repository("tasks", SqlAlchemyTaskRepository)

    async def commit(self) -> None:
        """Commit all pending changes."""
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        await self._session.commit()

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        await self._session.rollback()


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)
