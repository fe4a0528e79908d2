from sqlalchemy import select

from contracthub.models.product import Product
from contracthub.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    model = Product

    async def list_filtered(
        self,
        *,
        category: str | None = None,
        active: bool | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if category:
            stmt = stmt.where(Product.category == category)
        if active is not None:
            stmt = stmt.where(Product.is_active.is_(active))
        result = await self.db.execute(stmt.order_by(Product.name))
        return list(result.scalars().all())
