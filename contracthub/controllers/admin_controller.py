"""
Admin controller: staff user management, role catalogue and customer
portal access.

Every route requires the admin role (router-level dependency).
Controllers are THIN: they delegate to services and return schemas.
"""

from fastapi import APIRouter, Depends, status

from contracthub.rbac.dependencies import require_admin
from contracthub.rbac.permissions import ROLE_INFO, ROLE_PERMISSIONS
from contracthub.rbac.principal import Principal
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.dependencies import get_customer_repo, get_user_repo
from contracthub.repositories.user_repo import UserRepository
from contracthub.schemas import (
    ApiResponse,
    CustomerAccessGrant,
    CustomerAccessOut,
    CustomerAccessPasswordReset,
    CustomerAccessStatusUpdate,
    CustomerOut,
    RoleOut,
    StaffUserCreate,
    StaffUserUpdate,
    UserOut,
    UserStatusUpdate,
)
from contracthub.services import customer_access_service, user_service

router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


# ── Users ────────────────────────────────────────────────────────────
@router.get("/users", response_model=ApiResponse[list[UserOut]])
async def list_users(users: UserRepository = Depends(get_user_repo)):
    staff = await user_service.list_staff(users)
    return ApiResponse(data=[UserOut.model_validate(u) for u in staff])


@router.post("/users", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
async def create_user(body: StaffUserCreate, users: UserRepository = Depends(get_user_repo)):
    user = await user_service.create_staff_user(body, users)
    return ApiResponse(data=UserOut.model_validate(user), message="User created successfully")


@router.put("/users/{user_id}", response_model=ApiResponse[UserOut])
async def update_user(user_id: int, body: StaffUserUpdate, users: UserRepository = Depends(get_user_repo)):
    user = await user_service.update_staff_user(user_id, body, users)
    return ApiResponse(data=UserOut.model_validate(user), message="User updated successfully")


@router.put("/users/{user_id}/status", response_model=ApiResponse[UserOut])
async def update_user_status(
    user_id: int,
    body: UserStatusUpdate,
    admin: Principal = Depends(require_admin),
    users: UserRepository = Depends(get_user_repo),
):
    user = await user_service.set_user_active(user_id, body.is_active, admin, users)
    message = "User activated successfully" if user.is_active else "User deactivated successfully"
    return ApiResponse(data=UserOut.model_validate(user), message=message)


@router.delete("/users/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: int,
    admin: Principal = Depends(require_admin),
    users: UserRepository = Depends(get_user_repo),
):
    await user_service.delete_user(user_id, admin, users)
    return ApiResponse(message="User deleted successfully")


# ── Roles ────────────────────────────────────────────────────────────
@router.get("/roles", response_model=ApiResponse[list[RoleOut]])
async def list_roles():
    roles = [
        RoleOut(
            role=role,
            label=info["label"],
            description=info["description"],
            level=info["level"],
            permissions=sorted(p.value for p in ROLE_PERMISSIONS[role]),
        )
        for role, info in ROLE_INFO.items()
    ]
    return ApiResponse(data=roles)


# ── Customer portal access ───────────────────────────────────────────
@router.get("/customer-access", response_model=ApiResponse[list[CustomerAccessOut]])
async def list_customer_access(
    customers: CustomerRepository = Depends(get_customer_repo),
    users: UserRepository = Depends(get_user_repo),
):
    rows = await customer_access_service.list_access(customers, users)
    return ApiResponse(
        data=[
            CustomerAccessOut(
                customer=CustomerOut.model_validate(customer),
                user=UserOut.model_validate(user) if user else None,
            )
            for customer, user in rows
        ]
    )


@router.get("/customers-without-access", response_model=ApiResponse[list[CustomerOut]])
async def list_customers_without_access(customers: CustomerRepository = Depends(get_customer_repo)):
    items = await customer_access_service.list_without_access(customers)
    return ApiResponse(data=[CustomerOut.model_validate(c) for c in items])


@router.post("/customer-access", response_model=ApiResponse[CustomerAccessOut])
async def grant_customer_access(
    body: CustomerAccessGrant,
    customers: CustomerRepository = Depends(get_customer_repo),
    users: UserRepository = Depends(get_user_repo),
):
    user, customer = await customer_access_service.grant_access(
        body.customer_id,
        body.email,
        body.password,
        customers,
        users,
    )
    return ApiResponse(
        data=CustomerAccessOut(customer=CustomerOut.model_validate(customer), user=UserOut.model_validate(user)),
        message="Customer portal access granted successfully",
    )


@router.put("/customer-access/{customer_id}/status", response_model=ApiResponse[CustomerOut])
async def update_customer_access_status(
    customer_id: int,
    body: CustomerAccessStatusUpdate,
    customers: CustomerRepository = Depends(get_customer_repo),
    users: UserRepository = Depends(get_user_repo),
):
    customer = await customer_access_service.set_access_enabled(customer_id, body.can_login, customers, users)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Customer access status updated")


@router.put("/customer-access/{customer_id}/password", response_model=ApiResponse[None])
async def reset_customer_password(
    customer_id: int,
    body: CustomerAccessPasswordReset,
    customers: CustomerRepository = Depends(get_customer_repo),
    users: UserRepository = Depends(get_user_repo),
):
    await customer_access_service.reset_password(customer_id, body.password, customers, users)
    return ApiResponse(message="Password reset successfully")


@router.delete("/customer-access/{customer_id}", response_model=ApiResponse[CustomerOut])
async def revoke_customer_access(
    customer_id: int,
    customers: CustomerRepository = Depends(get_customer_repo),
    users: UserRepository = Depends(get_user_repo),
):
    customer = await customer_access_service.revoke_access(customer_id, customers, users)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Customer portal access revoked")
