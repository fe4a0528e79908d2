"""
Authentication service.

Handles:
- Principal resolution for every protected request (token → stored
  user → Principal).  Role and active flag always come from the store.
- Registration, login (with failed-attempt limiting), profile and
  password changes.

All business logic lives here; controllers call these functions and
wrap the result.
"""

import logging

from contracthub.core.errors import AuthenticationInvalid, AuthenticationMissing, Conflict, ValidationFailed
from contracthub.core.rate_limit import check_login_rate_limit, record_login_failure, reset_login_limit
from contracthub.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    validate_password_strength,
    verify_password,
)
from contracthub.models.base import utcnow
from contracthub.models.user import User
from contracthub.rbac.permissions import Role
from contracthub.rbac.principal import Principal
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

# Verified against when the email is unknown so both paths cost one bcrypt check.
_DUMMY_HASH = "$2b$12$C6UzMDM.H6dfI/f/IKxGhuJ3zQWmV4O9BwBnnbX5pb0hZVZ4PQS1S"


# ── Principal resolution ─────────────────────────────────────────────


async def resolve_principal(
    token: str | None,
    users: UserRepository,
    customers: CustomerRepository,
) -> Principal:
    """
    Turn a raw credential into a Principal.

      1. No credential                → AuthenticationMissing
      2. Bad signature / expired      → AuthenticationInvalid
      3. User gone or deactivated     → AuthenticationInvalid
      4. Customer role                → attach the linked profile, if any

    Read-only: nothing is written while resolving.
    """
    if not token:
        raise AuthenticationMissing("Access token required")

    claims = decode_access_token(token)

    user = await users.get_by_id(claims.principal_id)
    if user is None or not user.is_active:
        raise AuthenticationInvalid("User not found or inactive")

    customer = None
    if user.role == Role.CUSTOMER:
        customer = await customers.get_by_user_id(user.id)

    return Principal(user=user, role=user.role, customer=customer)


async def resolve_optional_principal(
    token: str | None,
    users: UserRepository,
    customers: CustomerRepository,
) -> Principal | None:
    try:
        return await resolve_principal(token, users, customers)
    except (AuthenticationMissing, AuthenticationInvalid):
        return None


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.role.value)


def _check_password_strength(password: str) -> None:
    problems = validate_password_strength(password)
    if problems:
        raise ValidationFailed("Password does not meet requirements", details=problems)


# ── Registration & login ─────────────────────────────────────────────


async def register_user(
    name: str,
    email: str,
    password: str,
    users: UserRepository,
) -> tuple[User, str]:
    _check_password_strength(password)

    if await users.get_by_email(email) is not None:
        raise Conflict("User with this email already exists")

    user = User(
        email=email.lower(),
        name=name,
        password_hash=hash_password(password),
        role=Role.USER,
        is_active=True,
        last_login_at=utcnow(),
    )
    user = await users.create(user)
    logger.info("Registered user %s (%s)", user.id, user.email)
    return user, issue_token(user)


async def authenticate(
    email: str,
    password: str,
    users: UserRepository,
) -> tuple[User, str]:
    """
    Validate credentials and return (user, token).

    Only failures count towards the per-email limit; a successful login
    clears it.
    """
    limit_key = check_login_rate_limit(email)

    user = await users.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        record_login_failure(limit_key)
        raise AuthenticationInvalid("Invalid email or password")

    if not verify_password(password, user.password_hash):
        record_login_failure(limit_key)
        raise AuthenticationInvalid("Invalid email or password")

    if not user.is_active:
        raise AuthenticationInvalid("Account is deactivated")

    reset_login_limit(limit_key)
    user.last_login_at = utcnow()
    user = await users.update(user)
    logger.info("User %s logged in", user.id)
    return user, issue_token(user)


# ── Profile ──────────────────────────────────────────────────────────


async def update_profile(
    user: User,
    users: UserRepository,
    *,
    name: str | None = None,
    email: str | None = None,
) -> User:
    if email is not None and email.lower() != user.email.lower():
        existing = await users.get_by_email(email)
        if existing is not None and existing.id != user.id:
            raise Conflict("Email already taken")
        user.email = email.lower()
    if name is not None:
        user.name = name
    return await users.update(user)


async def change_password(
    user: User,
    current_password: str,
    new_password: str,
    users: UserRepository,
) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValidationFailed("Current password is incorrect")
    _check_password_strength(new_password)
    user.password_hash = hash_password(new_password)
    await users.update(user)
    logger.info("User %s changed password", user.id)
