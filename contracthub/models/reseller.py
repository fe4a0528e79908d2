from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from contracthub.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class Reseller(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "resellers"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    margin_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)

    def __repr__(self) -> str:
        return f"<Reseller {self.name}>"
