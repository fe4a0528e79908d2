"""
Customer portal access (admin only).

Granting access creates a customer-role User and links it to the
Customer profile; the two stay in step afterwards:
- `can_login` on the profile and `is_active` on the user always match
- revoking access deletes the user and clears the link
"""

import logging

from contracthub.core.errors import Conflict, ResourceNotFound, ValidationFailed
from contracthub.core.security import hash_password
from contracthub.models.customer import Customer
from contracthub.models.user import User
from contracthub.rbac.permissions import Role
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.user_repo import UserRepository
from contracthub.services import email_service

logger = logging.getLogger(__name__)

MIN_PORTAL_PASSWORD_LENGTH = 8


def _check_password(password: str | None) -> str:
    if not password or len(password) < MIN_PORTAL_PASSWORD_LENGTH:
        raise ValidationFailed("Password must be at least 8 characters")
    return password


async def _customer_with_access(customer_id: int, customers: CustomerRepository) -> Customer:
    customer = await customers.get_by_id(customer_id)
    if customer is None or customer.user_id is None:
        raise ResourceNotFound("Customer access not found")
    return customer


async def list_access(customers: CustomerRepository, users: UserRepository) -> list[tuple[Customer, User | None]]:
    rows = []
    for customer in await customers.list_with_portal_access():
        rows.append((customer, await users.get_by_id(customer.user_id)))
    return rows


async def list_without_access(customers: CustomerRepository) -> list[Customer]:
    return await customers.list_without_portal_access()


async def grant_access(
    customer_id: int | None,
    email: str | None,
    password: str | None,
    customers: CustomerRepository,
    users: UserRepository,
) -> tuple[User, Customer]:
    if not customer_id or not email or not password:
        raise ValidationFailed("Customer ID, email, and password are required")
    _check_password(password)

    customer = await customers.get_by_id(customer_id)
    if customer is None:
        raise ResourceNotFound("Customer not found")
    if customer.user_id is not None:
        raise ValidationFailed("Customer already has portal access")
    if await users.get_by_email(email) is not None:
        raise Conflict("Email already in use")

    user = User(
        email=email.lower(),
        name=customer.full_name,
        password_hash=hash_password(password),
        role=Role.CUSTOMER,
        is_active=True,
    )
    user = await users.create(user)

    customer.user_id = user.id
    customer.user = user
    customer.can_login = True
    customer = await customers.update(customer)
    logger.info("Granted portal access to customer %s as user %s", customer.id, user.id)

    await email_service.send_portal_access_email(user.email, customer.full_name)
    return user, customer


async def set_access_enabled(
    customer_id: int,
    can_login: bool,
    customers: CustomerRepository,
    users: UserRepository,
) -> Customer:
    customer = await _customer_with_access(customer_id, customers)
    user = await users.get_by_id(customer.user_id)
    if user is None:
        raise ResourceNotFound("Customer access not found")

    customer.can_login = can_login
    user.is_active = can_login
    await users.update(user)
    customer = await customers.update(customer)
    logger.info("Portal access for customer %s %s", customer.id, "enabled" if can_login else "disabled")
    return customer


async def reset_password(
    customer_id: int,
    password: str | None,
    customers: CustomerRepository,
    users: UserRepository,
) -> None:
    _check_password(password)
    customer = await _customer_with_access(customer_id, customers)
    user = await users.get_by_id(customer.user_id)
    if user is None:
        raise ResourceNotFound("Customer access not found")
    user.password_hash = hash_password(password)
    await users.update(user)
    logger.info("Portal password reset for customer %s", customer.id)


async def revoke_access(
    customer_id: int,
    customers: CustomerRepository,
    users: UserRepository,
) -> Customer:
    customer = await _customer_with_access(customer_id, customers)
    user = await users.get_by_id(customer.user_id)

    customer.user_id = None
    customer.user = None
    customer.can_login = False
    customer = await customers.update(customer)
    if user is not None:
        await users.delete(user)
    logger.info("Revoked portal access for customer %s", customer.id)
    return customer
