from fastapi import APIRouter, Depends, Query, status

from contracthub.rbac.dependencies import require_permission, require_staff
from contracthub.rbac.permissions import Permission
from contracthub.repositories.dependencies import get_product_repo
from contracthub.repositories.product_repo import ProductRepository
from contracthub.schemas import ApiResponse, ProductCreate, ProductOut, ProductUpdate
from contracthub.services import product_service

router = APIRouter(prefix="/api/products", tags=["Products"], dependencies=[Depends(require_staff)])


@router.get(
    "",
    response_model=ApiResponse[list[ProductOut]],
    dependencies=[Depends(require_permission(Permission.PRODUCT_READ))],
)
async def list_products(
    category: str | None = Query(None),
    active: bool | None = Query(None),
    products: ProductRepository = Depends(get_product_repo),
):
    items = await product_service.list_products(products, category=category, active=active)
    return ApiResponse(data=[ProductOut.model_validate(p) for p in items])


@router.get(
    "/{product_id}",
    response_model=ApiResponse[ProductOut],
    dependencies=[Depends(require_permission(Permission.PRODUCT_READ))],
)
async def get_product(product_id: int, products: ProductRepository = Depends(get_product_repo)):
    product = await product_service.get_product(product_id, products)
    return ApiResponse(data=ProductOut.model_validate(product))


@router.post(
    "",
    response_model=ApiResponse[ProductOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(Permission.PRODUCT_CREATE))],
)
async def create_product(body: ProductCreate, products: ProductRepository = Depends(get_product_repo)):
    product = await product_service.create_product(body, products)
    return ApiResponse(data=ProductOut.model_validate(product), message="Product created successfully")


@router.put(
    "/{product_id}",
    response_model=ApiResponse[ProductOut],
    dependencies=[Depends(require_permission(Permission.PRODUCT_UPDATE))],
)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    products: ProductRepository = Depends(get_product_repo),
):
    product = await product_service.update_product(product_id, body, products)
    return ApiResponse(data=ProductOut.model_validate(product), message="Product updated successfully")


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_permission(Permission.PRODUCT_DELETE))],
)
async def delete_product(product_id: int, products: ProductRepository = Depends(get_product_repo)):
    await product_service.delete_product(product_id, products)
    return ApiResponse(message="Product deleted successfully")
