"""Static mappers for domain entities ↔ database models."""

from decimal import Decimal
from typing import Optional

from core.domain.entities import Customer, Domain, FulfillmentTask, HostingPackage, Order
from core.domain.enums import (
    BillingCycle,
    CustomerStatus,
    DomainStatus,
    OrderStatus,
    TaskStatus,
    TaskType,
)
from core.domain.value_objects import Money, OrderNumber

from .models import (
    CustomerModel,
    DomainModel,
    FulfillmentTaskModel,
    HostingPackageModel,
    OrderModel,
)


def _decimal(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


class CustomerMapper:
    """Static mapper for Customer ↔ CustomerModel transformation."""

    @staticmethod
    def to_domain(model: CustomerModel) -> Customer:
        return Customer(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            company=model.company,
            phone=model.phone,
            address=model.address,
            postal_code=model.postal_code,
            city=model.city,
            country=model.country,
            vat_number=model.vat_number,
            status=CustomerStatus(model.status),
            hosting_account_ref=model.hosting_account_ref,
            accounting_contact_ref=model.accounting_contact_ref,
            approved_at=model.approved_at,
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: Customer) -> CustomerModel:
        return CustomerModel(
            email=entity.email,
            first_name=entity.first_name,
            last_name=entity.last_name,
            company=entity.company,
            phone=entity.phone,
            address=entity.address,
            postal_code=entity.postal_code,
            city=entity.city,
            country=entity.country,
            vat_number=entity.vat_number,
            status=entity.status.value,
            hosting_account_ref=entity.hosting_account_ref,
            accounting_contact_ref=entity.accounting_contact_ref,
        )


class PackageMapper:
    """Static mapper for HostingPackage ↔ HostingPackageModel transformation."""

    @staticmethod
    def to_domain(model: HostingPackageModel) -> HostingPackage:
        return HostingPackage(
            id=model.id,
            name=model.name,
            description=model.description,
            price_monthly=_decimal(model.price_monthly),
            price_quarterly=_decimal(model.price_quarterly),
            price_yearly=_decimal(model.price_yearly),
            disk_space_mb=model.disk_space_mb,
            bandwidth_gb=model.bandwidth_gb,
            email_accounts=model.email_accounts,
            databases=model.databases,
            domains=model.domains,
            subdomains=model.subdomains,
            active=model.active,
        )

    @staticmethod
    def to_persistence(entity: HostingPackage) -> HostingPackageModel:
        return HostingPackageModel(
            name=entity.name,
            description=entity.description,
            price_monthly=entity.price_monthly,
            price_quarterly=entity.price_quarterly,
            price_yearly=entity.price_yearly,
            disk_space_mb=entity.disk_space_mb,
            bandwidth_gb=entity.bandwidth_gb,
            email_accounts=entity.email_accounts,
            databases=entity.databases,
            domains=entity.domains,
            subdomains=entity.subdomains,
            active=entity.active,
        )


class DomainMapper:
    """Static mapper for Domain ↔ DomainModel transformation."""

    @staticmethod
    def to_domain(model: DomainModel) -> Domain:
        return Domain(
            id=model.id,
            order_id=model.order_id,
            customer_id=model.customer_id,
            name=model.name,
            tld=model.tld,
            register=model.register,
            status=DomainStatus(model.status),
            registration_ref=model.registration_ref,
            hosting_subscription_ref=model.hosting_subscription_ref,
            registered_at=model.registered_at,
            expires_at=model.expires_at,
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: Domain) -> DomainModel:
        return DomainModel(
            customer_id=entity.customer_id,
            name=entity.name,
            tld=entity.tld,
            register=entity.register,
            status=entity.status.value,
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested domains."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert a fully loaded ORM model to the domain aggregate.

        Args:
            model: OrderModel with customer, package and domains eagerly loaded

        Returns:
            Order domain aggregate
        """
        currency = model.currency or "EUR"
        return Order(
            id=model.id,
            order_number=OrderNumber(value=model.order_number),
            customer_id=model.customer_id,
            hosting_package_id=model.hosting_package_id,
            status=OrderStatus(model.status),
            billing_cycle=BillingCycle(model.billing_cycle),
            subtotal=Money(_decimal(model.subtotal), currency),
            tax=Money(_decimal(model.tax), currency),
            total=Money(_decimal(model.total), currency),
            payment_ref=model.payment_ref,
            external_invoice_ref=model.external_invoice_ref,
            cancellation_reason=model.cancellation_reason,
            notes=model.notes,
            paid_at=model.paid_at,
            approved_at=model.approved_at,
            provisioned_at=model.provisioned_at,
            activated_at=model.activated_at,
            cancelled_at=model.cancelled_at,
            next_billing_date=model.next_billing_date,
            created_at=model.created_at,
            customer=CustomerMapper.to_domain(model.customer) if model.customer else None,
            package=PackageMapper.to_domain(model.package) if model.package else None,
            domains=[DomainMapper.to_domain(d) for d in model.domains],
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert a new order (with its domains) to ORM models."""
        model = OrderModel(
            order_number=entity.order_number.value,
            customer_id=entity.customer_id,
            hosting_package_id=entity.hosting_package_id,
            status=entity.status.value,
            billing_cycle=entity.billing_cycle.value,
            subtotal=entity.subtotal.amount,
            tax=entity.tax.amount,
            total=entity.total.amount,
            currency=entity.total.currency,
            notes=entity.notes,
        )
        model.domains = [DomainMapper.to_persistence(d) for d in entity.domains]
        return model


class TaskMapper:
    """Static mapper for FulfillmentTask ↔ FulfillmentTaskModel transformation."""

    @staticmethod
    def to_domain(model: FulfillmentTaskModel) -> FulfillmentTask:
        return FulfillmentTask(
            id=model.id,
            task_type=TaskType(model.task_type),
            order_id=model.order_id,
            domain_id=model.domain_id,
            payload=dict(model.payload or {}),
            status=TaskStatus(model.status),
            attempts=model.attempts,
            max_attempts=model.max_attempts,
            backoff_seconds=model.backoff_seconds,
            last_error=model.last_error,
            next_run_at=model.next_run_at,
            started_at=model.started_at,
            finished_at=model.finished_at,
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: FulfillmentTask) -> FulfillmentTaskModel:
        return FulfillmentTaskModel(
            task_type=entity.task_type.value,
            order_id=entity.order_id,
            domain_id=entity.domain_id,
            payload=entity.payload,
            status=entity.status.value,
            attempts=entity.attempts,
            max_attempts=entity.max_attempts,
            backoff_seconds=entity.backoff_seconds,
            next_run_at=entity.next_run_at,
        )
