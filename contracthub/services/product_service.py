import logging

from contracthub.core.errors import ResourceNotFound
from contracthub.models.product import Product
from contracthub.repositories.product_repo import ProductRepository
from contracthub.schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("name", "category", "base_price", "is_bundle", "discount_percentage", "is_active")


async def get_product(product_id: int, products: ProductRepository) -> Product:
    product = await products.get_by_id(product_id)
    if product is None:
        raise ResourceNotFound("Product not found")
    return product


async def list_products(
    products: ProductRepository,
    *,
    category: str | None = None,
    active: bool | None = None,
) -> list[Product]:
    return await products.list_filtered(category=category, active=active)


async def create_product(body: ProductCreate, products: ProductRepository) -> Product:
    product = await products.create(Product(**body.model_dump()))
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


async def update_product(product_id: int, body: ProductUpdate, products: ProductRepository) -> Product:
    product = await get_product(product_id, products)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(product, field, value)
    return await products.update(product)


async def delete_product(product_id: int, products: ProductRepository) -> None:
    product = await get_product(product_id, products)
    await products.delete(product)
    logger.info("Deleted product %s", product_id)
