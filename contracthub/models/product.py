from __future__ import annotations

"""
Product model.

Bundles are ordinary products with `is_bundle` set; `bundle_products`
holds the ids of the bundled products and `original_price` /
`discount_percentage` describe the bundle discount.  Only active
products are offered in the customer portal.
"""

from decimal import Decimal

from sqlalchemy import JSON, Boolean, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from contracthub.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class Product(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    is_bundle: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    bundle_products: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    discount_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Product {self.name}>"
