"""
Staff user management (admin only).

Customer-role accounts are not managed here; they are created and
removed through the customer-access flow so that a profile link always
exists.  An admin can never deactivate or delete their own account.
"""

import logging

from contracthub.core.errors import Conflict, ResourceNotFound, ValidationFailed
from contracthub.core.security import hash_password
from contracthub.models.user import User
from contracthub.rbac.permissions import Role
from contracthub.rbac.principal import Principal
from contracthub.repositories.user_repo import UserRepository
from contracthub.schemas import StaffUserCreate, StaffUserUpdate

logger = logging.getLogger(__name__)


async def get_user(user_id: int, users: UserRepository) -> User:
    user = await users.get_by_id(user_id)
    if user is None:
        raise ResourceNotFound("User not found")
    return user


async def get_staff_account(user_id: int, users: UserRepository) -> User:
    user = await get_user(user_id, users)
    if user.role == Role.CUSTOMER:
        raise ValidationFailed("Customer accounts are managed through customer access")
    return user


async def list_staff(users: UserRepository, active_only: bool = False) -> list[User]:
    return await users.list_staff(active_only=active_only)


async def create_staff_user(body: StaffUserCreate, users: UserRepository) -> User:
    if body.role == Role.CUSTOMER:
        raise ValidationFailed("Customer accounts are created through customer access")
    if await users.get_by_email(body.email) is not None:
        raise Conflict("Email already in use")

    user = User(
        email=body.email.lower(),
        name=body.name,
        password_hash=hash_password(body.password),
        role=body.role,
        is_active=body.is_active,
    )
    user = await users.create(user)
    logger.info("Created staff user %s with role %s", user.id, user.role.value)
    return user


async def update_staff_user(user_id: int, body: StaffUserUpdate, users: UserRepository) -> User:
    user = await get_user(user_id, users)

    if body.role is not None and body.role != user.role:
        if user.role == Role.CUSTOMER or body.role == Role.CUSTOMER:
            raise ValidationFailed("Cannot change customer role")
        logger.info("User %s role %s → %s", user.id, user.role.value, body.role.value)
        user.role = body.role

    if body.email is not None and body.email.lower() != user.email.lower():
        existing = await users.get_by_email(body.email)
        if existing is not None and existing.id != user.id:
            raise Conflict("Email already in use")
        user.email = body.email.lower()

    if body.name is not None:
        user.name = body.name

    return await users.update(user)


async def set_user_active(
    user_id: int,
    is_active: bool,
    actor: Principal,
    users: UserRepository,
) -> User:
    if user_id == actor.id and not is_active:
        raise ValidationFailed("Cannot deactivate your own account")
    user = await get_staff_account(user_id, users)
    user.is_active = is_active
    logger.info("User %s %s by %s", user.id, "activated" if is_active else "deactivated", actor.id)
    return await users.update(user)


async def delete_user(user_id: int, actor: Principal, users: UserRepository) -> None:
    if user_id == actor.id:
        raise ValidationFailed("Cannot delete your own account")
    user = await get_staff_account(user_id, users)
    await users.delete(user)
    logger.info("User %s deleted by %s", user_id, actor.id)
