"""
Customer controller: staff CRUD over customer records.

Staff only; each route adds its own `customer.*` permission.
Status changes live in the staff controller (they go through the
status machine), not in the generic update here.
"""

from fastapi import APIRouter, Depends, Query, status

from contracthub.rbac.dependencies import require_permission, require_staff
from contracthub.rbac.permissions import Permission
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.dependencies import get_customer_repo
from contracthub.schemas import ApiResponse, CustomerCreate, CustomerOut, CustomerUpdate
from contracthub.services import customer_service

router = APIRouter(prefix="/api/customers", tags=["Customers"], dependencies=[Depends(require_staff)])


@router.get(
    "",
    response_model=ApiResponse[list[CustomerOut]],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_READ))],
)
async def list_customers(
    search: str | None = Query(None, max_length=100),
    customers: CustomerRepository = Depends(get_customer_repo),
):
    items = await customers.search(search=search)
    return ApiResponse(data=[CustomerOut.model_validate(c) for c in items])


@router.get(
    "/{customer_id}",
    response_model=ApiResponse[CustomerOut],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_READ))],
)
async def get_customer(customer_id: int, customers: CustomerRepository = Depends(get_customer_repo)):
    customer = await customer_service.get_customer(customer_id, customers)
    return ApiResponse(data=CustomerOut.model_validate(customer))


@router.post(
    "",
    response_model=ApiResponse[CustomerOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(Permission.CUSTOMER_CREATE))],
)
async def create_customer(body: CustomerCreate, customers: CustomerRepository = Depends(get_customer_repo)):
    customer = await customer_service.create_customer(body, customers)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Customer created successfully")


@router.put(
    "/{customer_id}",
    response_model=ApiResponse[CustomerOut],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_UPDATE))],
)
async def update_customer(
    customer_id: int,
    body: CustomerUpdate,
    customers: CustomerRepository = Depends(get_customer_repo),
):
    customer = await customer_service.update_customer(customer_id, body, customers)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Customer updated successfully")


@router.delete(
    "/{customer_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_DELETE))],
)
async def delete_customer(customer_id: int, customers: CustomerRepository = Depends(get_customer_repo)):
    await customer_service.delete_customer(customer_id, customers)
    return ApiResponse(message="Customer deleted successfully")
