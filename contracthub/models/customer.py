from __future__ import annotations

"""
Customer model.

A customer is a business record managed by staff.  It may optionally be
linked to exactly one customer-role User (`user_id`), which is what
grants portal access; `can_login` mirrors whether that access is
currently enabled.

Approval metadata (`approved_by_id`, `approved_at`) is written once,
on the first pending_approval → active transition, and never cleared.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contracthub.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from contracthub.models.user import User


class CustomerStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING_APPROVAL = "pending_approval"


class CustomerType(str, enum.Enum):
    INDIVIDUAL = "individual"
    PARTNER = "partner"
    RESELLER = "reseller"
    SOLUTION_PROVIDER = "solution_provider"


class Customer(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "customers"

    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(256), index=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    customer_type: Mapped[CustomerType] = mapped_column(
        Enum(CustomerType, name="customer_type", values_callable=lambda e: [m.value for m in e]),
        default=CustomerType.INDIVIDUAL,
        nullable=False,
    )
    street: Mapped[str | None] = mapped_column(String(256), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    state: Mapped[str | None] = mapped_column(String(64), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), default="USA", nullable=True)

    status: Mapped[CustomerStatus] = mapped_column(
        Enum(CustomerStatus, name="customer_status", values_callable=lambda e: [m.value for m in e]),
        default=CustomerStatus.PENDING_APPROVAL,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Portal access
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
    )
    can_login: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Staff workflow
    assigned_to_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    approved_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # ── Relationships ────────────────────────────────────────────────
    user: Mapped["User | None"] = relationship(  # noqa: F821
        back_populates="customer_profile",
        foreign_keys=[user_id],
        lazy="selectin",
    )
    assigned_to: Mapped["User | None"] = relationship(  # noqa: F821
        foreign_keys=[assigned_to_id],
        lazy="selectin",
    )
    approved_by: Mapped["User | None"] = relationship(  # noqa: F821
        foreign_keys=[approved_by_id],
        lazy="selectin",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Customer {self.full_name} ({self.status.value})>"
