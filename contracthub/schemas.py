"""
Pydantic schemas for request / response serialization.

Kept in a single file, grouped by area.  Every model speaks camelCase
on the wire (`alias_generator=to_camel`) while accepting snake_case too,
and every route wraps its payload in `ApiResponse`.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Generic, TypeVar

from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel

from contracthub.models.contract import BillingCycle, BillingStatus
from contracthub.models.customer import CustomerStatus, CustomerType
from contracthub.models.purchase_order import PurchaseOrderStatus
from contracthub.rbac.permissions import Role

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


# ── Envelope ─────────────────────────────────────────────────────────
class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    data: T | None = None
    message: str | None = None


class Page(CamelModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    pages: int


# ── Users ────────────────────────────────────────────────────────────
class UserOut(CamelModel):
    id: int
    email: str
    name: str
    role: Role
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    id: int
    name: str
    email: str
    role: Role


# ── Customers ────────────────────────────────────────────────────────
class CustomerCreate(CamelModel):
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=32)
    customer_type: CustomerType = CustomerType.INDIVIDUAL
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = "USA"
    notes: str | None = Field(default=None, max_length=1000)


class CustomerUpdate(CamelModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=128)
    last_name: str | None = Field(default=None, min_length=1, max_length=128)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)
    customer_type: CustomerType | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class CustomerOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str | None = None
    customer_type: CustomerType
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    status: CustomerStatus
    notes: str | None = None
    user_id: int | None = None
    can_login: bool
    assigned_to_id: int | None = None
    approved_by_id: int | None = None
    approved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class CustomerDetailOut(CustomerOut):
    assigned_to: UserSummary | None = None
    approved_by: UserSummary | None = None


class CustomerStatusUpdate(CamelModel):
    status: CustomerStatus
    notes: str | None = Field(default=None, max_length=1000)


class CustomerAssign(CamelModel):
    staff_id: int


class CustomerNotesUpdate(CamelModel):
    notes: str = Field(max_length=1000)


class CustomerStatsOut(CamelModel):
    total: int
    active: int
    pending: int
    suspended: int
    inactive: int


# ── Products ─────────────────────────────────────────────────────────
class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=256)
    description: str | None = None
    category: str = Field(min_length=1, max_length=64)
    base_price: Decimal = Field(default=Decimal("0"), ge=0)
    is_bundle: bool = False
    bundle_products: list[int] | None = None
    original_price: Decimal | None = Field(default=None, ge=0)
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    is_active: bool = True


class ProductUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=256)
    description: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=64)
    base_price: Decimal | None = Field(default=None, ge=0)
    is_bundle: bool | None = None
    bundle_products: list[int] | None = None
    original_price: Decimal | None = Field(default=None, ge=0)
    discount_percentage: Decimal | None = Field(default=None, ge=0, le=100)
    is_active: bool | None = None


class ProductOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    category: str
    base_price: Decimal
    is_bundle: bool
    bundle_products: list[int] | None = None
    original_price: Decimal | None = None
    discount_percentage: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ── Resellers ────────────────────────────────────────────────────────
class ResellerCreate(CamelModel):
    name: str = Field(min_length=1, max_length=256)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=32)
    margin_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class ResellerUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=256)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)
    margin_percentage: Decimal | None = Field(default=None, ge=0, le=100)


class ResellerOut(CamelModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    margin_percentage: Decimal
    created_at: datetime
    updated_at: datetime


# ── Contracts ────────────────────────────────────────────────────────
class CustomerBrief(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str


class ProductBrief(CamelModel):
    id: int
    name: str
    category: str


class ResellerBrief(CamelModel):
    id: int
    name: str
    margin_percentage: Decimal


class ContractCreate(CamelModel):
    customer_id: int
    product_id: int
    reseller_id: int | None = None
    contract_term: int = Field(default=1, ge=1, le=10)
    start_date: date
    end_date: date | None = None
    billing_cycle: BillingCycle = BillingCycle.ANNUAL
    billing_status: BillingStatus = BillingStatus.PENDING
    amount: Decimal = Field(ge=0)
    reseller_margin: Decimal | None = Field(default=None, ge=0, le=100)
    net_amount: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class ContractUpdate(CamelModel):
    customer_id: int | None = None
    product_id: int | None = None
    reseller_id: int | None = None
    contract_term: int | None = Field(default=None, ge=1, le=10)
    start_date: date | None = None
    end_date: date | None = None
    billing_cycle: BillingCycle | None = None
    billing_status: BillingStatus | None = None
    amount: Decimal | None = Field(default=None, ge=0)
    reseller_margin: Decimal | None = Field(default=None, ge=0, le=100)
    net_amount: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class ContractOut(CamelModel):
    id: int
    customer_id: int
    product_id: int
    reseller_id: int | None = None
    contract_term: int
    start_date: date
    end_date: date
    billing_cycle: BillingCycle
    billing_status: BillingStatus
    amount: Decimal
    reseller_margin: Decimal
    net_amount: Decimal
    notes: str | None = None
    customer: CustomerBrief | None = None
    product: ProductBrief | None = None
    reseller: ResellerBrief | None = None
    created_at: datetime
    updated_at: datetime


# ── Purchase orders ──────────────────────────────────────────────────
class PurchaseOrderOut(CamelModel):
    id: int
    contract_id: int
    customer_id: int
    po_number: str
    file_name: str
    file_size: int
    mime_type: str
    status: PurchaseOrderStatus
    review_notes: str | None = None
    reviewed_by_id: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime


class PurchaseOrderReview(CamelModel):
    notes: str | None = Field(default=None, max_length=1000)


# ── Auth ─────────────────────────────────────────────────────────────
class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=256)
    email: EmailStr
    password: str


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthPayload(CamelModel):
    user: UserOut
    token: str


class MeOut(CamelModel):
    user: UserOut
    customer: CustomerOut | None = None
    permissions: list[str]


class ProfileUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=256)
    email: EmailStr | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str


class AuthStatusOut(CamelModel):
    is_authenticated: bool
    user: UserOut | None = None


# ── Admin ────────────────────────────────────────────────────────────
class StaffUserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=256)
    email: EmailStr
    password: str = Field(min_length=8)
    role: Role = Role.USER
    is_active: bool = True


class StaffUserUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=256)
    email: EmailStr | None = None
    role: Role | None = None


class UserStatusUpdate(CamelModel):
    is_active: bool


class RoleOut(CamelModel):
    role: Role
    label: str
    description: str
    level: int
    permissions: list[str]


class CustomerAccessGrant(CamelModel):
    """Fields are checked in the service so the missing-field message stays exact."""

    customer_id: int | None = None
    email: EmailStr | None = None
    password: str | None = None


class CustomerAccessOut(CamelModel):
    customer: CustomerOut
    user: UserOut | None = None


class CustomerAccessStatusUpdate(CamelModel):
    can_login: bool


class CustomerAccessPasswordReset(CamelModel):
    password: str


# ── Customer portal ──────────────────────────────────────────────────
class PortalProfile(CamelModel):
    name: str
    email: str
    type: CustomerType


class PortalContractSummary(CamelModel):
    all: list[ContractOut]
    active: list[ContractOut]
    pending: list[ContractOut]
    total: int
    total_value: Decimal


class PortalDashboardOut(CamelModel):
    customer: PortalProfile
    contracts: PortalContractSummary
    products: list[ProductOut]
    purchase_orders: list[PurchaseOrderOut]


class PortalContractDetail(CamelModel):
    contract: ContractOut
    purchase_orders: list[PurchaseOrderOut]


class PortalContractOrder(CamelModel):
    product_id: int
    contract_term: int = Field(default=1, ge=1, le=10)
    billing_cycle: BillingCycle = BillingCycle.ANNUAL
    notes: str | None = Field(default=None, max_length=1000)


# ── Health ───────────────────────────────────────────────────────────
class HealthOut(CamelModel):
    status: str
    database: str
    version: str
