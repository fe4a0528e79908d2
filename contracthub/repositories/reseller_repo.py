from contracthub.models.reseller import Reseller
from contracthub.repositories.base import BaseRepository


class ResellerRepository(BaseRepository[Reseller]):
    model = Reseller
