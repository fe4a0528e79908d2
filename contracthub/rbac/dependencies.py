"""
RBAC dependencies: the heart of permission enforcement.

Each guard is an independent FastAPI dependency.  A route stacks them
in a fixed order:

1. Authentication  (`get_current_principal`) → 401
2. Role class      (`require_staff`, `require_admin`, `require_customer`) → 403
3. Permission      (`require_permission(...)`) → 403
4. Ownership       (`contracthub.rbac.ownership`) → 404

Denials never say which permission was missing; the details go to the
`rbac` logger only.

Usage in a route:
    @router.get("/customers", dependencies=[Depends(require_permission(Permission.CUSTOMER_READ))])
    async def list_customers(...): ...

Or inject the principal:
    @router.put("/customers/{id}")
    async def update(principal: Principal = Depends(require_permission(Permission.CUSTOMER_UPDATE))): ...
"""

import logging

from fastapi import Depends, Request

from contracthub.core.errors import AuthorizationDenied
from contracthub.core.security import extract_credential, oauth2_scheme
from contracthub.rbac.permissions import Permission, Role, has_permission
from contracthub.rbac.principal import Principal
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.dependencies import get_customer_repo, get_user_repo
from contracthub.repositories.user_repo import UserRepository
from contracthub.services import auth_service

logger = logging.getLogger("rbac")


async def get_current_principal(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
    users: UserRepository = Depends(get_user_repo),
    customers: CustomerRepository = Depends(get_customer_repo),
) -> Principal:
    token = extract_credential(request, bearer)
    return await auth_service.resolve_principal(token, users, customers)


async def get_optional_principal(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
    users: UserRepository = Depends(get_user_repo),
    customers: CustomerRepository = Depends(get_customer_repo),
) -> Principal | None:
    """Same resolution as `get_current_principal`, but anonymous instead of 401."""
    token = extract_credential(request, bearer)
    return await auth_service.resolve_optional_principal(token, users, customers)


class require_role:
    """
    Dependency factory restricting a route to a set of roles.

        Depends(require_role(Role.ADMIN, Role.MANAGER))
    """

    def __init__(self, *roles: Role, message: str = "Insufficient permissions"):
        self.roles = frozenset(roles)
        self.message = message

    async def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in self.roles:
            logger.warning(
                "Role check failed for user %s: role=%s, allowed=%s",
                principal.id,
                principal.role.value,
                sorted(r.value for r in self.roles),
            )
            raise AuthorizationDenied(self.message)
        return principal


async def require_staff(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_staff:
        logger.warning("Staff-only route refused for user %s (role=%s)", principal.id, principal.role.value)
        raise AuthorizationDenied("Staff access required")
    return principal


require_admin = require_role(Role.ADMIN, message="Admin access required")


async def require_customer(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Customer role AND a linked customer profile."""
    if principal.role != Role.CUSTOMER:
        raise AuthorizationDenied("Customer access required")
    if principal.customer is None:
        logger.warning("Customer user %s has no linked customer profile", principal.id)
        raise AuthorizationDenied("Customer profile not found")
    return principal


class require_permission:
    """
    Dependency factory.

    Can be used as:
        Depends(require_permission(Permission.CUSTOMER_READ))
        Depends(require_permission("customer.update", "customer.approve"))

    Every listed permission must be held.
    """

    def __init__(self, *permissions: Permission | str):
        self.required = tuple(permissions)

    async def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        missing = [p for p in self.required if not has_permission(principal.role, p)]
        if missing:
            logger.warning(
                "Permission denied for user %s (role=%s): required %s",
                principal.id,
                principal.role.value,
                [str(getattr(p, "value", p)) for p in self.required],
            )
            # Intentionally vague: do NOT reveal which permissions are missing
            raise AuthorizationDenied("Insufficient permissions")
        return principal


def ensure_permission(principal: Principal, permission: Permission) -> None:
    """In-service variant of `require_permission` for checks that depend on the request body."""
    if not principal.can(permission):
        logger.warning(
            "Permission denied for user %s (role=%s): required %s",
            principal.id,
            principal.role.value,
            permission.value,
        )
        raise AuthorizationDenied("Insufficient permissions")
