"""
Role → permission table.

The table is static and written out in full for every role; there is no
inheritance between roles, so reading a role's entry tells you exactly
what it can do.  Adding a permission means adding it to `Permission`
and to every role entry that should hold it.

Governance rules baked into the table:
    • Only ADMIN may delete catalogue data, manage users or change settings
    • CUSTOMER holds nothing; portal access is decided by ownership, not
      permissions
"""

import enum
from collections.abc import Mapping
from types import MappingProxyType


class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    SALES = "sales"
    SUPPORT = "support"
    FINANCE = "finance"
    VIEWER = "viewer"
    USER = "user"
    CUSTOMER = "customer"


STAFF_ROLES: frozenset[Role] = frozenset(r for r in Role if r is not Role.CUSTOMER)


class Permission(str, enum.Enum):
    # Customers
    CUSTOMER_READ = "customer.read"
    CUSTOMER_CREATE = "customer.create"
    CUSTOMER_UPDATE = "customer.update"
    CUSTOMER_DELETE = "customer.delete"
    CUSTOMER_APPROVE = "customer.approve"
    CUSTOMER_SUSPEND = "customer.suspend"
    CUSTOMER_ASSIGN = "customer.assign"
    # Contracts
    CONTRACT_READ = "contract.read"
    CONTRACT_CREATE = "contract.create"
    CONTRACT_UPDATE = "contract.update"
    CONTRACT_DELETE = "contract.delete"
    CONTRACT_APPROVE = "contract.approve"
    # Products
    PRODUCT_READ = "product.read"
    PRODUCT_CREATE = "product.create"
    PRODUCT_UPDATE = "product.update"
    PRODUCT_DELETE = "product.delete"
    # Resellers
    RESELLER_READ = "reseller.read"
    RESELLER_CREATE = "reseller.create"
    RESELLER_UPDATE = "reseller.update"
    RESELLER_DELETE = "reseller.delete"
    # Purchase orders
    PO_READ = "po.read"
    PO_APPROVE = "po.approve"
    PO_REJECT = "po.reject"
    # User management
    USER_READ = "user.read"
    USER_CREATE = "user.create"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"
    # Reporting & settings
    ANALYTICS_READ = "analytics.read"
    SETTINGS_READ = "settings.read"
    SETTINGS_UPDATE = "settings.update"


ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

P = Permission

# ────────────────────────────────────────────────────────────────────
# ROLE → PERMISSION MAPPING
# ────────────────────────────────────────────────────────────────────
_ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: ALL_PERMISSIONS,
    Role.MANAGER: frozenset({
        P.CUSTOMER_READ, P.CUSTOMER_CREATE, P.CUSTOMER_UPDATE,
        P.CUSTOMER_APPROVE, P.CUSTOMER_SUSPEND, P.CUSTOMER_ASSIGN,
        P.CONTRACT_READ, P.CONTRACT_CREATE, P.CONTRACT_UPDATE, P.CONTRACT_APPROVE,
        P.PRODUCT_READ, P.PRODUCT_CREATE, P.PRODUCT_UPDATE,
        P.RESELLER_READ, P.RESELLER_CREATE, P.RESELLER_UPDATE,
        P.PO_READ, P.PO_APPROVE, P.PO_REJECT,
        P.USER_READ,
        P.ANALYTICS_READ,
        P.SETTINGS_READ,
    }),
    Role.SALES: frozenset({
        P.CUSTOMER_READ, P.CUSTOMER_CREATE, P.CUSTOMER_UPDATE,
        P.CONTRACT_READ, P.CONTRACT_CREATE, P.CONTRACT_UPDATE,
        P.PRODUCT_READ,
        P.RESELLER_READ, P.RESELLER_CREATE, P.RESELLER_UPDATE,
        P.PO_READ,
        P.ANALYTICS_READ,
    }),
    Role.SUPPORT: frozenset({
        P.CUSTOMER_READ, P.CUSTOMER_UPDATE,
        P.CONTRACT_READ, P.CONTRACT_UPDATE,
        P.PRODUCT_READ,
        P.RESELLER_READ,
        P.PO_READ, P.PO_APPROVE, P.PO_REJECT,
    }),
    Role.FINANCE: frozenset({
        P.CUSTOMER_READ,
        P.CONTRACT_READ,
        P.PRODUCT_READ,
        P.RESELLER_READ,
        P.PO_READ, P.PO_APPROVE,
        P.ANALYTICS_READ,
    }),
    Role.VIEWER: frozenset({
        P.CUSTOMER_READ,
        P.CONTRACT_READ,
        P.PRODUCT_READ,
        P.RESELLER_READ,
        P.PO_READ,
        P.ANALYTICS_READ,
    }),
    Role.USER: frozenset({
        P.CUSTOMER_READ,
        P.CONTRACT_READ,
        P.PRODUCT_READ,
        P.RESELLER_READ,
    }),
    # Portal users act only on what they own.
    Role.CUSTOMER: frozenset(),
}

ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = MappingProxyType(_ROLE_PERMISSIONS)


ROLE_INFO: Mapping[Role, dict[str, object]] = MappingProxyType({
    Role.ADMIN: {"label": "Administrator", "description": "Full system access and user management", "level": 5},
    Role.MANAGER: {"label": "Manager", "description": "Customer and contract management", "level": 4},
    Role.SALES: {"label": "Sales", "description": "Customer acquisition and relationship management", "level": 3},
    Role.SUPPORT: {"label": "Support", "description": "Customer support and issue resolution", "level": 2},
    Role.FINANCE: {"label": "Finance", "description": "Financial reporting and billing management", "level": 2},
    Role.VIEWER: {"label": "Viewer", "description": "Read-only access to system data", "level": 1},
    Role.USER: {"label": "User", "description": "Basic system access", "level": 1},
    Role.CUSTOMER: {"label": "Customer", "description": "Customer portal access", "level": 0},
})


def _validate_table() -> None:
    missing = set(Role) - set(ROLE_PERMISSIONS)
    if missing:
        raise RuntimeError(f"Roles without a permission entry: {sorted(r.value for r in missing)}")
    for role, granted in ROLE_PERMISSIONS.items():
        unknown = granted - ALL_PERMISSIONS
        if unknown:
            raise RuntimeError(f"Role {role.value} grants unknown permissions: {sorted(unknown)}")
    if set(ROLE_INFO) != set(Role):
        raise RuntimeError("Every role needs display metadata")


_validate_table()


def _coerce_role(role: Role | str | None) -> Role | None:
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        return None


def _coerce_permission(permission: Permission | str | None) -> Permission | None:
    if isinstance(permission, Permission):
        return permission
    try:
        return Permission(permission)
    except ValueError:
        return None


def permissions_for(role: Role | str | None) -> frozenset[Permission]:
    """Permission set of `role`; unknown roles hold nothing."""
    resolved = _coerce_role(role)
    if resolved is None:
        return frozenset()
    return ROLE_PERMISSIONS[resolved]


def has_permission(role: Role | str | None, permission: Permission | str | None) -> bool:
    """True only when `role` is known and its entry lists `permission`.  Never raises."""
    resolved = _coerce_permission(permission)
    if resolved is None:
        return False
    return resolved in permissions_for(role)


def is_staff_role(role: Role | str | None) -> bool:
    return _coerce_role(role) in STAFF_ROLES
