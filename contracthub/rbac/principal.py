"""
The authenticated caller for one request.

Built fresh by the principal resolver on every request from the stored
user, so role changes and deactivation take effect on the next call.
Immutable: nothing downstream can widen what a request may do.
"""

from dataclasses import dataclass

from contracthub.models.customer import Customer
from contracthub.models.user import User
from contracthub.rbac.permissions import STAFF_ROLES, Permission, Role, has_permission, permissions_for


@dataclass(frozen=True)
class Principal:
    user: User
    role: Role
    customer: Customer | None = None

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def is_active(self) -> bool:
        return bool(self.user.is_active)

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def customer_id(self) -> int | None:
        return self.customer.id if self.customer is not None else None

    @property
    def permissions(self) -> frozenset[Permission]:
        return permissions_for(self.role)

    def can(self, permission: Permission | str) -> bool:
        return has_permission(self.role, permission)
