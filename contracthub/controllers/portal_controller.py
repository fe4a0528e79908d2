"""
Customer portal controller.

Customer role with a linked profile on every route.  Everything is
scoped to `principal.customer`; contracts and purchase orders
addressed by id go through the ownership guard, so another customer's
id looks exactly like a missing one (404).
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from contracthub.models.contract import Contract
from contracthub.models.purchase_order import PurchaseOrder
from contracthub.rbac.dependencies import require_customer
from contracthub.rbac.ownership import ResourceKind, ensure_owned, owned_contract, owned_purchase_order
from contracthub.rbac.principal import Principal
from contracthub.repositories.contract_repo import ContractRepository
from contracthub.repositories.dependencies import get_contract_repo, get_product_repo, get_purchase_order_repo
from contracthub.repositories.product_repo import ProductRepository
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository
from contracthub.schemas import (
    ApiResponse,
    ContractOut,
    PortalContractDetail,
    PortalContractOrder,
    PortalDashboardOut,
    ProductOut,
    PurchaseOrderOut,
)
from contracthub.services import portal_service, purchase_order_service

router = APIRouter(prefix="/api/customer-portal", tags=["Customer Portal"], dependencies=[Depends(require_customer)])


@router.get("/dashboard", response_model=ApiResponse[PortalDashboardOut])
async def dashboard(
    principal: Principal = Depends(require_customer),
    contracts: ContractRepository = Depends(get_contract_repo),
    products: ProductRepository = Depends(get_product_repo),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    data = await portal_service.dashboard(principal.customer, contracts, products, purchase_orders)
    return ApiResponse(data=PortalDashboardOut.model_validate(data, from_attributes=True))


@router.get("/contracts", response_model=ApiResponse[list[ContractOut]])
async def list_contracts(
    status_filter: str | None = Query(None, alias="status"),
    principal: Principal = Depends(require_customer),
    contracts: ContractRepository = Depends(get_contract_repo),
):
    items = await portal_service.list_contracts(principal.customer, contracts, status_filter)
    return ApiResponse(data=[ContractOut.model_validate(c) for c in items])


@router.get("/contracts/{contract_id}", response_model=ApiResponse[PortalContractDetail])
async def get_contract(
    contract: Contract = Depends(owned_contract),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    orders = await portal_service.contract_purchase_orders(contract, purchase_orders)
    return ApiResponse(
        data=PortalContractDetail(
            contract=ContractOut.model_validate(contract),
            purchase_orders=[PurchaseOrderOut.model_validate(po) for po in orders],
        )
    )


@router.post("/contracts", response_model=ApiResponse[ContractOut], status_code=status.HTTP_201_CREATED)
async def order_contract(
    body: PortalContractOrder,
    principal: Principal = Depends(require_customer),
    contracts: ContractRepository = Depends(get_contract_repo),
    products: ProductRepository = Depends(get_product_repo),
):
    contract = await portal_service.order_contract(principal.customer, body, contracts, products)
    return ApiResponse(data=ContractOut.model_validate(contract), message="Contract ordered successfully")


@router.get("/products", response_model=ApiResponse[list[ProductOut]])
async def list_products(products: ProductRepository = Depends(get_product_repo)):
    items = await portal_service.available_products(products)
    return ApiResponse(data=[ProductOut.model_validate(p) for p in items])


@router.get("/purchase-orders", response_model=ApiResponse[list[PurchaseOrderOut]])
async def list_purchase_orders(
    principal: Principal = Depends(require_customer),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    items = await portal_service.customer_purchase_orders(principal.customer, purchase_orders)
    return ApiResponse(data=[PurchaseOrderOut.model_validate(po) for po in items])


@router.get("/purchase-orders/{purchase_order_id}", response_model=ApiResponse[PurchaseOrderOut])
async def get_purchase_order(purchase_order: PurchaseOrder = Depends(owned_purchase_order)):
    return ApiResponse(data=PurchaseOrderOut.model_validate(purchase_order))


@router.post("/purchase-orders", response_model=ApiResponse[PurchaseOrderOut], status_code=status.HTTP_201_CREATED)
async def upload_purchase_order(
    contract_id: int = Form(..., alias="contractId", gt=0),
    po_number: str = Form(..., alias="poNumber", min_length=1, max_length=50),
    po_file: UploadFile | None = File(None, alias="poFile"),
    principal: Principal = Depends(require_customer),
    contracts: ContractRepository = Depends(get_contract_repo),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    contract = ensure_owned(await contracts.get_by_id(contract_id), ResourceKind.CONTRACT, principal)
    purchase_order = await purchase_order_service.upload_purchase_order(
        contract,
        po_number,
        po_file,
        purchase_orders,
    )
    return ApiResponse(data=PurchaseOrderOut.model_validate(purchase_order), message="Purchase order uploaded")
