from collections.abc import Iterable

from sqlalchemy import select

from contracthub.models.contract import BillingStatus, Contract
from contracthub.repositories.base import BaseRepository


class ContractRepository(BaseRepository[Contract]):
    model = Contract

    async def list_by_status(self, status: BillingStatus) -> list[Contract]:
        result = await self.db.execute(
            select(Contract).where(Contract.billing_status == status).order_by(Contract.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_customer(
        self,
        customer_id: int,
        statuses: Iterable[BillingStatus] | None = None,
    ) -> list[Contract]:
        stmt = select(Contract).where(Contract.customer_id == customer_id)
        if statuses is not None:
            stmt = stmt.where(Contract.billing_status.in_(list(statuses)))
        result = await self.db.execute(stmt.order_by(Contract.created_at.desc()))
        return list(result.scalars().all())
