import logging

from contracthub.core.errors import ResourceNotFound
from contracthub.models.reseller import Reseller
from contracthub.repositories.reseller_repo import ResellerRepository
from contracthub.schemas import ResellerCreate, ResellerUpdate

logger = logging.getLogger(__name__)


async def get_reseller(reseller_id: int, resellers: ResellerRepository) -> Reseller:
    reseller = await resellers.get_by_id(reseller_id)
    if reseller is None:
        raise ResourceNotFound("Reseller not found")
    return reseller


async def create_reseller(body: ResellerCreate, resellers: ResellerRepository) -> Reseller:
    reseller = await resellers.create(Reseller(**body.model_dump()))
    logger.info("Created reseller %s (%s)", reseller.id, reseller.name)
    return reseller


async def update_reseller(reseller_id: int, body: ResellerUpdate, resellers: ResellerRepository) -> Reseller:
    reseller = await get_reseller(reseller_id, resellers)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field != "phone":
            continue
        setattr(reseller, field, value)
    return await resellers.update(reseller)


async def delete_reseller(reseller_id: int, resellers: ResellerRepository) -> None:
    reseller = await get_reseller(reseller_id, resellers)
    await resellers.delete(reseller)
    logger.info("Deleted reseller %s", reseller_id)
