from __future__ import annotations

"""
Purchase order model.

Uploaded by a portal customer against one of their own contracts and
reviewed by staff.  `customer_id` mirrors the contract's owner: copied at
upload time and rewritten when the contract moves to another customer,
so ownership checks never need a join.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contracthub.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from contracthub.models.contract import Contract
    from contracthub.models.user import User


class PurchaseOrderStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PurchaseOrder(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "purchase_orders"

    contract_id: Mapped[int] = mapped_column(
        ForeignKey("contracts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    po_number: Mapped[str] = mapped_column(String(50), nullable=False)
    file_name: Mapped[str] = mapped_column(String(256), nullable=False)
    file_path: Mapped[str] = mapped_column(String(512), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[PurchaseOrderStatus] = mapped_column(
        Enum(PurchaseOrderStatus, name="purchase_order_status", values_callable=lambda e: [m.value for m in e]),
        default=PurchaseOrderStatus.PENDING,
        nullable=False,
    )
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # ── Relationships ────────────────────────────────────────────────
    contract: Mapped["Contract"] = relationship(lazy="selectin")  # noqa: F821
    reviewed_by: Mapped["User | None"] = relationship(lazy="selectin")  # noqa: F821

    def __repr__(self) -> str:
        return f"<PurchaseOrder {self.po_number} ({self.status.value})>"
