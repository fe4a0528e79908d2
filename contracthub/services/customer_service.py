"""
Customer service.

Business rules for customer records, including the status machine:

    pending_approval ──approve──▶ active
    any ──suspend──▶ suspended
    any ──▶ any   (plain status write)

- Approval (pending_approval → active) needs `customer.approve` and
  records who approved and when, but only the first time; approval
  metadata is never cleared or overwritten afterwards.
- Moving into `suspended` needs `customer.suspend`.
- Everything else needs `customer.update` only.
- There is no terminal state.
"""

import logging
import math

from contracthub.core.errors import ResourceNotFound, ValidationFailed
from contracthub.models.base import utcnow
from contracthub.models.customer import Customer, CustomerStatus
from contracthub.rbac.dependencies import ensure_permission
from contracthub.rbac.permissions import Permission, is_staff_role
from contracthub.rbac.principal import Principal
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.user_repo import UserRepository
from contracthub.schemas import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


async def get_customer(customer_id: int, customers: CustomerRepository) -> Customer:
    customer = await customers.get_by_id(customer_id)
    if customer is None:
        raise ResourceNotFound("Customer not found")
    return customer


async def list_customers(
    customers: CustomerRepository,
    *,
    search: str | None = None,
    status: CustomerStatus | None = None,
    assigned_to_id: int | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Customer], int, int]:
    """Return (items, total, pages) for one page of customers."""
    skip = (page - 1) * limit
    items = await customers.search(
        search=search,
        status=status,
        assigned_to_id=assigned_to_id,
        skip=skip,
        limit=limit,
    )
    total = await customers.count_matching(search=search, status=status, assigned_to_id=assigned_to_id)
    pages = math.ceil(total / limit) if limit else 0
    return items, total, pages


async def create_customer(body: CustomerCreate, customers: CustomerRepository) -> Customer:
    """New customers always wait for approval; status moves only through `change_status`."""
    customer = Customer(
        **body.model_dump(),
        status=CustomerStatus.PENDING_APPROVAL,
        can_login=False,
    )
    customer = await customers.create(customer)
    logger.info("Created customer %s (%s)", customer.id, customer.email)
    return customer


async def update_customer(
    customer_id: int,
    body: CustomerUpdate,
    customers: CustomerRepository,
) -> Customer:
    customer = await get_customer(customer_id, customers)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in ("first_name", "last_name", "email", "customer_type"):
            continue
        setattr(customer, field, value)
    return await customers.update(customer)


async def delete_customer(customer_id: int, customers: CustomerRepository) -> None:
    customer = await get_customer(customer_id, customers)
    await customers.delete(customer)
    logger.info("Deleted customer %s", customer_id)


# ── Status machine ───────────────────────────────────────────────────


def required_permission_for(current: CustomerStatus, target: CustomerStatus) -> Permission:
    if current == CustomerStatus.PENDING_APPROVAL and target == CustomerStatus.ACTIVE:
        return Permission.CUSTOMER_APPROVE
    if target == CustomerStatus.SUSPENDED:
        return Permission.CUSTOMER_SUSPEND
    return Permission.CUSTOMER_UPDATE


def transition_status(
    customer: Customer,
    target: CustomerStatus,
    actor: Principal,
) -> Customer:
    """Apply one status change in memory.  Raises AuthorizationDenied if the actor lacks the action's permission."""
    current = customer.status
    ensure_permission(actor, required_permission_for(current, target))

    is_approval = current == CustomerStatus.PENDING_APPROVAL and target == CustomerStatus.ACTIVE
    if is_approval and customer.approved_by_id is None and customer.approved_at is None:
        customer.approved_by_id = actor.id
        customer.approved_at = utcnow()

    customer.status = target
    logger.info(
        "Customer %s status %s → %s by user %s",
        customer.id,
        current.value,
        target.value,
        actor.id,
    )
    return customer


async def change_status(
    customer_id: int,
    target: CustomerStatus,
    actor: Principal,
    customers: CustomerRepository,
    notes: str | None = None,
) -> Customer:
    customer = await get_customer(customer_id, customers)
    transition_status(customer, target, actor)
    if notes is not None:
        customer.notes = notes
    return await customers.update(customer)


# ── Staff workflow ───────────────────────────────────────────────────


async def assign_customer(
    customer_id: int,
    staff_id: int,
    customers: CustomerRepository,
    users: UserRepository,
) -> Customer:
    customer = await get_customer(customer_id, customers)
    staff_user = await users.get_by_id(staff_id)
    if staff_user is None or not is_staff_role(staff_user.role):
        raise ValidationFailed("Invalid staff member")
    customer.assigned_to_id = staff_user.id
    customer.assigned_to = staff_user
    return await customers.update(customer)


async def update_notes(customer_id: int, notes: str, customers: CustomerRepository) -> Customer:
    customer = await get_customer(customer_id, customers)
    customer.notes = notes
    return await customers.update(customer)


async def customer_stats(customers: CustomerRepository) -> dict[str, int]:
    counts = await customers.count_by_status()
    return {
        "total": sum(counts.values()),
        "active": counts[CustomerStatus.ACTIVE],
        "pending": counts[CustomerStatus.PENDING_APPROVAL],
        "suspended": counts[CustomerStatus.SUSPENDED],
        "inactive": counts[CustomerStatus.INACTIVE],
    }
