"""
Contract controller: staff CRUD over contracts.

`GET /status/{billing_status}` is declared before `/{contract_id}` so
the literal segment wins the route match.
"""

from fastapi import APIRouter, Depends, status

from contracthub.models.contract import BillingStatus
from contracthub.rbac.dependencies import require_permission, require_staff
from contracthub.rbac.permissions import Permission
from contracthub.repositories.contract_repo import ContractRepository
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.dependencies import (
    get_contract_repo,
    get_customer_repo,
    get_product_repo,
    get_purchase_order_repo,
    get_reseller_repo,
)
from contracthub.repositories.product_repo import ProductRepository
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository
from contracthub.repositories.reseller_repo import ResellerRepository
from contracthub.schemas import ApiResponse, ContractCreate, ContractOut, ContractUpdate
from contracthub.services import contract_service

router = APIRouter(prefix="/api/contracts", tags=["Contracts"], dependencies=[Depends(require_staff)])

_read = [Depends(require_permission(Permission.CONTRACT_READ))]


@router.get("", response_model=ApiResponse[list[ContractOut]], dependencies=_read)
async def list_contracts(contracts: ContractRepository = Depends(get_contract_repo)):
    items = await contract_service.list_contracts(contracts)
    return ApiResponse(data=[ContractOut.model_validate(c) for c in items])


@router.get("/status/{billing_status}", response_model=ApiResponse[list[ContractOut]], dependencies=_read)
async def list_contracts_by_status(
    billing_status: BillingStatus,
    contracts: ContractRepository = Depends(get_contract_repo),
):
    items = await contract_service.list_contracts(contracts, billing_status)
    return ApiResponse(data=[ContractOut.model_validate(c) for c in items])


@router.get("/{contract_id}", response_model=ApiResponse[ContractOut], dependencies=_read)
async def get_contract(contract_id: int, contracts: ContractRepository = Depends(get_contract_repo)):
    contract = await contract_service.get_contract(contract_id, contracts)
    return ApiResponse(data=ContractOut.model_validate(contract))


@router.post(
    "",
    response_model=ApiResponse[ContractOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(Permission.CONTRACT_CREATE))],
)
async def create_contract(
    body: ContractCreate,
    contracts: ContractRepository = Depends(get_contract_repo),
    customers: CustomerRepository = Depends(get_customer_repo),
    products: ProductRepository = Depends(get_product_repo),
    resellers: ResellerRepository = Depends(get_reseller_repo),
):
    contract = await contract_service.create_contract(body, contracts, customers, products, resellers)
    return ApiResponse(data=ContractOut.model_validate(contract), message="Contract created successfully")


@router.put(
    "/{contract_id}",
    response_model=ApiResponse[ContractOut],
    dependencies=[Depends(require_permission(Permission.CONTRACT_UPDATE))],
)
async def update_contract(
    contract_id: int,
    body: ContractUpdate,
    contracts: ContractRepository = Depends(get_contract_repo),
    customers: CustomerRepository = Depends(get_customer_repo),
    products: ProductRepository = Depends(get_product_repo),
    resellers: ResellerRepository = Depends(get_reseller_repo),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    contract = await contract_service.update_contract(
        contract_id, body, contracts, customers, products, resellers, purchase_orders
    )
    return ApiResponse(data=ContractOut.model_validate(contract), message="Contract updated successfully")


@router.delete(
    "/{contract_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_permission(Permission.CONTRACT_DELETE))],
)
async def delete_contract(contract_id: int, contracts: ContractRepository = Depends(get_contract_repo)):
    await contract_service.delete_contract(contract_id, contracts)
    return ApiResponse(message="Contract deleted successfully")
