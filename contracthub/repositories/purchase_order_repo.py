from sqlalchemy import select, update

from contracthub.models.purchase_order import PurchaseOrder, PurchaseOrderStatus
from contracthub.repositories.base import BaseRepository


class PurchaseOrderRepository(BaseRepository[PurchaseOrder]):
    model = PurchaseOrder

    async def list_filtered(self, status: PurchaseOrderStatus | None = None) -> list[PurchaseOrder]:
        stmt = select(PurchaseOrder)
        if status is not None:
            stmt = stmt.where(PurchaseOrder.status == status)
        result = await self.db.execute(stmt.order_by(PurchaseOrder.created_at.desc()))
        return list(result.scalars().all())

    async def list_for_customer(self, customer_id: int) -> list[PurchaseOrder]:
        result = await self.db.execute(
            select(PurchaseOrder)
            .where(PurchaseOrder.customer_id == customer_id)
            .order_by(PurchaseOrder.created_at.desc())
        )
        return list(result.scalars().all())

    async def reassign_customer(self, contract_id: int, customer_id: int) -> int:
        """Point every purchase order of a contract at its new owning customer."""
        result = await self.db.execute(
            update(PurchaseOrder)
            .where(PurchaseOrder.contract_id == contract_id)
            .values(customer_id=customer_id)
        )
        await self.db.flush()
        return result.rowcount

    async def list_for_contract(self, contract_id: int) -> list[PurchaseOrder]:
        result = await self.db.execute(
            select(PurchaseOrder)
            .where(PurchaseOrder.contract_id == contract_id)
            .order_by(PurchaseOrder.created_at.desc())
        )
        return list(result.scalars().all())
