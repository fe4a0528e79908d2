from __future__ import annotations

"""
User model.

One table for every login: staff of every role and portal customers.
The role column is the single source of truth for authorization; the
token only carries a copy.  A customer-role user is linked to its
Customer profile through `Customer.user_id`.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contracthub.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from contracthub.rbac.permissions import STAFF_ROLES, Role

if TYPE_CHECKING:
    from contracthub.models.customer import Customer


class User(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(256), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(512), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=Role.USER,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # ── Relationships ────────────────────────────────────────────────
    customer_profile: Mapped["Customer | None"] = relationship(  # noqa: F821
        back_populates="user",
        uselist=False,
        lazy="selectin",
        foreign_keys="[Customer.user_id]",
    )

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"
