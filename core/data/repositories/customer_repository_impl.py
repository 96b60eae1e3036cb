"""SQLAlchemy implementation of CustomerRepository."""

from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Customer
from core.domain.enums import CustomerStatus
from core.domain.exceptions import ConflictError
from core.domain.repositories import CustomerRepository
from hostflow_sdk.utils.datetime import utc_now

from ..mappers import CustomerMapper
from ..models import CustomerModel


class SqlAlchemyCustomerRepository(CustomerRepository):
    """Concrete implementation of CustomerRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, customer: Customer) -> Customer:
        model = CustomerMapper.to_persistence(customer)
        self._session.add(model)
        await self._session.flush()
        return CustomerMapper.to_domain(model)

    async def find_by_id(self, customer_id: int) -> Optional[Customer]:
        result = await self._session.execute(
            select(CustomerModel)
            .where(CustomerModel.id == customer_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return CustomerMapper.to_domain(model) if model else None

    async def find_by_email(self, email: str) -> Optional[Customer]:
        result = await self._session.execute(
            select(CustomerModel)
            .where(CustomerModel.email == email.lower())
            .order_by(CustomerModel.id)
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return CustomerMapper.to_domain(model) if model else None

    async def transition(
        self, customer_id: int, expected: CustomerStatus, new: CustomerStatus, **fields: Any
    ) -> None:
        result = await self._session.execute(
            update(CustomerModel)
            .where(CustomerModel.id == customer_id, CustomerModel.status == expected.value)
            .values(status=new.value, updated_at=utc_now(), **fields)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError("customer", customer_id, expected.value)

    async def set_hosting_account_ref(self, customer_id: int, ref: str) -> bool:
        return await self._set_once(customer_id, CustomerModel.hosting_account_ref, ref)

    async def set_accounting_contact_ref(self, customer_id: int, ref: str) -> bool:
        return await self._set_once(customer_id, CustomerModel.accounting_contact_ref, ref)

    async def _set_once(self, customer_id: int, column, ref: str) -> bool:
        result = await self._session.execute(
            update(CustomerModel)
            .where(CustomerModel.id == customer_id, column.is_(None))
            .values({column: ref, CustomerModel.updated_at: utc_now()})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
