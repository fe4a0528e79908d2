from fastapi import APIRouter, Depends, status

from contracthub.rbac.dependencies import require_permission, require_staff
from contracthub.rbac.permissions import Permission
from contracthub.repositories.dependencies import get_reseller_repo
from contracthub.repositories.reseller_repo import ResellerRepository
from contracthub.schemas import ApiResponse, ResellerCreate, ResellerOut, ResellerUpdate
from contracthub.services import reseller_service

router = APIRouter(prefix="/api/resellers", tags=["Resellers"], dependencies=[Depends(require_staff)])


@router.get(
    "",
    response_model=ApiResponse[list[ResellerOut]],
    dependencies=[Depends(require_permission(Permission.RESELLER_READ))],
)
async def list_resellers(resellers: ResellerRepository = Depends(get_reseller_repo)):
    items = await resellers.get_all()
    return ApiResponse(data=[ResellerOut.model_validate(r) for r in items])


@router.get(
    "/{reseller_id}",
    response_model=ApiResponse[ResellerOut],
    dependencies=[Depends(require_permission(Permission.RESELLER_READ))],
)
async def get_reseller(reseller_id: int, resellers: ResellerRepository = Depends(get_reseller_repo)):
    reseller = await reseller_service.get_reseller(reseller_id, resellers)
    return ApiResponse(data=ResellerOut.model_validate(reseller))


@router.post(
    "",
    response_model=ApiResponse[ResellerOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(Permission.RESELLER_CREATE))],
)
async def create_reseller(body: ResellerCreate, resellers: ResellerRepository = Depends(get_reseller_repo)):
    reseller = await reseller_service.create_reseller(body, resellers)
    return ApiResponse(data=ResellerOut.model_validate(reseller), message="Reseller created successfully")


@router.put(
    "/{reseller_id}",
    response_model=ApiResponse[ResellerOut],
    dependencies=[Depends(require_permission(Permission.RESELLER_UPDATE))],
)
async def update_reseller(
    reseller_id: int,
    body: ResellerUpdate,
    resellers: ResellerRepository = Depends(get_reseller_repo),
):
    reseller = await reseller_service.update_reseller(reseller_id, body, resellers)
    return ApiResponse(data=ResellerOut.model_validate(reseller), message="Reseller updated successfully")


@router.delete(
    "/{reseller_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_permission(Permission.RESELLER_DELETE))],
)
async def delete_reseller(reseller_id: int, resellers: ResellerRepository = Depends(get_reseller_repo)):
    await reseller_service.delete_reseller(reseller_id, resellers)
    return ApiResponse(message="Reseller deleted successfully")
