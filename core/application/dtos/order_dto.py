"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.entities import Customer, Domain, HostingPackage, Order
from core.domain.enums import BillingCycle


class CustomerInput(BaseModel):
    """Customer contact data supplied with a new order."""

    email: str = Field(..., min_length=3, max_length=255, description="E-mail address")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    company: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    postal_code: Optional[str] = Field(None, max_length=20)
    city: Optional[str] = Field(None, max_length=100)
    country: str = Field(default="NL", min_length=2, max_length=2, description="ISO 3166 alpha-2")
    vat_number: Optional[str] = Field(None, max_length=50)

    model_config = {"frozen": True}


class DomainInput(BaseModel):
    """A domain requested with an order."""

    name: str = Field(..., min_length=4, max_length=253, description="Fully qualified domain name")
    register: bool = Field(default=True, description="Register the name (False: customer already owns it)")

    model_config = {"frozen": True}


class CreateOrderRequest(BaseModel):
    """Request DTO for creating an order."""

    customer: CustomerInput
    hosting_package_id: Optional[int] = Field(None, description="Catalog package id; omit for domain-only orders")
    billing_cycle: BillingCycle = Field(default=BillingCycle.MONTHLY)
    domains: List[DomainInput] = Field(..., min_length=1, description="Domains on the order")
    notes: Optional[str] = Field(None, max_length=2000)

    model_config = {"frozen": True}


class CancelOrderRequest(BaseModel):
    """Request DTO for cancelling an order."""

    reason: Optional[str] = Field(None, max_length=1000)


class CustomerDTO(BaseModel):
    """Response DTO for customer details."""

    id: int
    email: str
    first_name: str
    last_name: str
    company: Optional[str] = None
    country: str
    status: str
    hosting_account_ref: Optional[str] = None
    accounting_contact_ref: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerDTO":
        return cls(
            id=customer.id,
            email=customer.email,
            first_name=customer.first_name,
            last_name=customer.last_name,
            company=customer.company,
            country=customer.country,
            status=customer.status.value,
            hosting_account_ref=customer.hosting_account_ref,
            accounting_contact_ref=customer.accounting_contact_ref,
        )


class PackageDTO(BaseModel):
    """Response DTO for a catalog package."""

    id: int
    name: str
    description: Optional[str] = None
    price_monthly: Decimal
    price_quarterly: Optional[Decimal] = None
    price_yearly: Decimal
    disk_space_mb: int
    bandwidth_gb: int
    email_accounts: int
    databases: int
    domains: int

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, package: HostingPackage) -> "PackageDTO":
        return cls(
            id=package.id,
            name=package.name,
            description=package.description,
            price_monthly=package.price_monthly,
            price_quarterly=package.price_quarterly,
            price_yearly=package.price_yearly,
            disk_space_mb=package.disk_space_mb,
            bandwidth_gb=package.bandwidth_gb,
            email_accounts=package.email_accounts,
            databases=package.databases,
            domains=package.domains,
        )


class DomainDTO(BaseModel):
    """Response DTO for a domain."""

    id: int
    name: str
    tld: str
    register: bool
    status: str
    registration_ref: Optional[str] = None
    hosting_subscription_ref: Optional[str] = None
    registered_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, domain: Domain) -> "DomainDTO":
        return cls(
            id=domain.id,
            name=domain.name,
            tld=domain.tld,
            register=domain.register,
            status=domain.status.value,
            registration_ref=domain.registration_ref,
            hosting_subscription_ref=domain.hosting_subscription_ref,
            registered_at=domain.registered_at,
            expires_at=domain.expires_at,
        )


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: int
    order_number: str = Field(..., description="Human-readable order number")
    status: str
    billing_cycle: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    currency: str
    customer: Optional[CustomerDTO] = None
    package: Optional[PackageDTO] = None
    domains: List[DomainDTO] = Field(default_factory=list)
    payment_ref: Optional[str] = None
    external_invoice_ref: Optional[str] = None
    cancellation_reason: Optional[str] = None
    paid_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    provisioned_at: Optional[datetime] = None
    activated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    next_billing_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDTO":
        return cls(
            id=order.id,
            order_number=order.order_number.value,
            status=order.status.value,
            billing_cycle=order.billing_cycle.value,
            subtotal=order.subtotal.amount,
            tax=order.tax.amount,
            total=order.total.amount,
            currency=order.total.currency,
            customer=CustomerDTO.from_entity(order.customer) if order.customer else None,
            package=PackageDTO.from_entity(order.package) if order.package else None,
            domains=[DomainDTO.from_entity(d) for d in order.domains],
            payment_ref=order.payment_ref,
            external_invoice_ref=order.external_invoice_ref,
            cancellation_reason=order.cancellation_reason,
            paid_at=order.paid_at,
            approved_at=order.approved_at,
            provisioned_at=order.provisioned_at,
            activated_at=order.activated_at,
            cancelled_at=order.cancelled_at,
            next_billing_date=order.next_billing_date,
            created_at=order.created_at,
        )


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    total: int = Field(..., ge=0, description="Number of orders in this page")

    model_config = {"frozen": True}
