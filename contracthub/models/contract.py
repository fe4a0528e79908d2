from __future__ import annotations

"""
Contract model.

A contract binds one customer to one product for `contract_term` years,
optionally through a reseller.  `net_amount` is what is left of
`amount` once the reseller's margin is taken off.
"""

import enum
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contracthub.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from contracthub.models.customer import Customer
    from contracthub.models.product import Product
    from contracthub.models.reseller import Reseller


class BillingStatus(str, enum.Enum):
    PENDING = "PENDING"
    BILLED = "BILLED"
    RECEIVED = "RECEIVED"
    PAID = "PAID"
    LATE = "LATE"
    CANCELED = "CANCELED"


# Portal groupings of billing statuses.
ACTIVE_BILLING_STATUSES = frozenset({BillingStatus.BILLED, BillingStatus.RECEIVED, BillingStatus.PAID})
INACTIVE_BILLING_STATUSES = frozenset({BillingStatus.PENDING, BillingStatus.CANCELED, BillingStatus.LATE})


class BillingCycle(str, enum.Enum):
    ANNUAL = "annual"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class Contract(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "contracts"

    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    reseller_id: Mapped[int | None] = mapped_column(
        ForeignKey("resellers.id", ondelete="SET NULL"),
        nullable=True,
    )
    contract_term: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        Enum(BillingCycle, name="billing_cycle", values_callable=lambda e: [m.value for m in e]),
        default=BillingCycle.ANNUAL,
        nullable=False,
    )
    billing_status: Mapped[BillingStatus] = mapped_column(
        Enum(BillingStatus, name="billing_status"),
        default=BillingStatus.PENDING,
        index=True,
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    reseller_margin: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    net_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ── Relationships ────────────────────────────────────────────────
    customer: Mapped["Customer"] = relationship(lazy="selectin")  # noqa: F821
    product: Mapped["Product"] = relationship(lazy="selectin")  # noqa: F821
    reseller: Mapped["Reseller | None"] = relationship(lazy="selectin")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Contract #{self.id} customer={self.customer_id} {self.billing_status.value}>"
