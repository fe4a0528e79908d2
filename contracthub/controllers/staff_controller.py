"""
Staff controller: the customer-management workflow.

Staff role class on every route, then the route's own permission.
The status route is gated on `customer.update`; approving or
suspending additionally needs `customer.approve` / `customer.suspend`,
which the status machine checks against the requested target.
"""

from fastapi import APIRouter, Depends, Query

from contracthub.models.customer import CustomerStatus
from contracthub.models.purchase_order import PurchaseOrderStatus
from contracthub.rbac.dependencies import require_permission, require_staff
from contracthub.rbac.permissions import Permission
from contracthub.rbac.principal import Principal
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.dependencies import get_customer_repo, get_purchase_order_repo, get_user_repo
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository
from contracthub.repositories.user_repo import UserRepository
from contracthub.schemas import (
    ApiResponse,
    CustomerAssign,
    CustomerDetailOut,
    CustomerNotesUpdate,
    CustomerOut,
    CustomerStatsOut,
    CustomerStatusUpdate,
    Page,
    PurchaseOrderOut,
    PurchaseOrderReview,
    UserSummary,
)
from contracthub.services import customer_service, purchase_order_service

router = APIRouter(prefix="/api/staff", tags=["Staff"], dependencies=[Depends(require_staff)])


# ── Customers ────────────────────────────────────────────────────────
@router.get(
    "/customers",
    response_model=ApiResponse[Page[CustomerOut]],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_READ))],
)
async def list_customers(
    status: CustomerStatus | None = Query(None),
    assigned_to: int | None = Query(None, alias="assignedTo"),
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    customers: CustomerRepository = Depends(get_customer_repo),
):
    items, total, pages = await customer_service.list_customers(
        customers,
        search=search,
        status=status,
        assigned_to_id=assigned_to,
        page=page,
        limit=limit,
    )
    return ApiResponse(
        data=Page(
            items=[CustomerOut.model_validate(c) for c in items],
            total=total,
            page=page,
            limit=limit,
            pages=pages,
        )
    )


@router.get(
    "/customers/{customer_id}",
    response_model=ApiResponse[CustomerDetailOut],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_READ))],
)
async def get_customer(customer_id: int, customers: CustomerRepository = Depends(get_customer_repo)):
    customer = await customer_service.get_customer(customer_id, customers)
    return ApiResponse(data=CustomerDetailOut.model_validate(customer))


@router.put("/customers/{customer_id}/status", response_model=ApiResponse[CustomerOut])
async def update_customer_status(
    customer_id: int,
    body: CustomerStatusUpdate,
    principal: Principal = Depends(require_permission(Permission.CUSTOMER_UPDATE)),
    customers: CustomerRepository = Depends(get_customer_repo),
):
    customer = await customer_service.change_status(customer_id, body.status, principal, customers, notes=body.notes)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Customer status updated")


@router.put(
    "/customers/{customer_id}/assign",
    response_model=ApiResponse[CustomerDetailOut],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_ASSIGN))],
)
async def assign_customer(
    customer_id: int,
    body: CustomerAssign,
    customers: CustomerRepository = Depends(get_customer_repo),
    users: UserRepository = Depends(get_user_repo),
):
    customer = await customer_service.assign_customer(customer_id, body.staff_id, customers, users)
    return ApiResponse(data=CustomerDetailOut.model_validate(customer), message="Customer assigned successfully")


@router.put(
    "/customers/{customer_id}/notes",
    response_model=ApiResponse[CustomerOut],
    dependencies=[Depends(require_permission(Permission.CUSTOMER_UPDATE))],
)
async def update_customer_notes(
    customer_id: int,
    body: CustomerNotesUpdate,
    customers: CustomerRepository = Depends(get_customer_repo),
):
    customer = await customer_service.update_notes(customer_id, body.notes, customers)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Notes updated successfully")


# ── Staff directory & stats ──────────────────────────────────────────
@router.get(
    "/staff",
    response_model=ApiResponse[list[UserSummary]],
    dependencies=[Depends(require_permission(Permission.USER_READ))],
)
async def list_staff(users: UserRepository = Depends(get_user_repo)):
    staff = await users.list_staff(active_only=True)
    return ApiResponse(data=[UserSummary.model_validate(u) for u in staff])


@router.get(
    "/stats",
    response_model=ApiResponse[CustomerStatsOut],
    dependencies=[Depends(require_permission(Permission.ANALYTICS_READ))],
)
async def customer_stats(customers: CustomerRepository = Depends(get_customer_repo)):
    stats = await customer_service.customer_stats(customers)
    return ApiResponse(data=CustomerStatsOut(**stats))


# ── Purchase orders ──────────────────────────────────────────────────
@router.get(
    "/purchase-orders",
    response_model=ApiResponse[list[PurchaseOrderOut]],
    dependencies=[Depends(require_permission(Permission.PO_READ))],
)
async def list_purchase_orders(
    status: PurchaseOrderStatus | None = Query(None),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    items = await purchase_orders.list_filtered(status)
    return ApiResponse(data=[PurchaseOrderOut.model_validate(po) for po in items])


@router.put("/purchase-orders/{purchase_order_id}/approve", response_model=ApiResponse[PurchaseOrderOut])
async def approve_purchase_order(
    purchase_order_id: int,
    body: PurchaseOrderReview | None = None,
    principal: Principal = Depends(require_permission(Permission.PO_APPROVE)),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    purchase_order = await purchase_order_service.review_purchase_order(
        purchase_order_id,
        PurchaseOrderStatus.APPROVED,
        principal,
        purchase_orders,
        notes=body.notes if body else None,
    )
    return ApiResponse(data=PurchaseOrderOut.model_validate(purchase_order), message="Purchase order approved")


@router.put("/purchase-orders/{purchase_order_id}/reject", response_model=ApiResponse[PurchaseOrderOut])
async def reject_purchase_order(
    purchase_order_id: int,
    body: PurchaseOrderReview | None = None,
    principal: Principal = Depends(require_permission(Permission.PO_REJECT)),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
):
    purchase_order = await purchase_order_service.review_purchase_order(
        purchase_order_id,
        PurchaseOrderStatus.REJECTED,
        principal,
        purchase_orders,
        notes=body.notes if body else None,
    )
    return ApiResponse(data=PurchaseOrderOut.model_validate(purchase_order), message="Purchase order rejected")
