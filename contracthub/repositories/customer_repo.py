from sqlalchemy import Select, func, or_, select

from contracthub.models.customer import Customer, CustomerStatus
from contracthub.repositories.base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    model = Customer

    def _filtered(
        self,
        stmt: Select,
        search: str | None,
        status: CustomerStatus | None,
        assigned_to_id: int | None,
    ) -> Select:
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Customer.first_name).like(pattern),
                    func.lower(Customer.last_name).like(pattern),
                    func.lower(Customer.email).like(pattern),
                )
            )
        if status is not None:
            stmt = stmt.where(Customer.status == status)
        if assigned_to_id is not None:
            stmt = stmt.where(Customer.assigned_to_id == assigned_to_id)
        return stmt

    async def search(
        self,
        *,
        search: str | None = None,
        status: CustomerStatus | None = None,
        assigned_to_id: int | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Customer]:
        stmt = self._filtered(select(Customer), search, status, assigned_to_id)
        stmt = stmt.order_by(Customer.created_at.desc()).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_matching(
        self,
        *,
        search: str | None = None,
        status: CustomerStatus | None = None,
        assigned_to_id: int | None = None,
    ) -> int:
        stmt = self._filtered(select(func.count(Customer.id)), search, status, assigned_to_id)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def get_by_user_id(self, user_id: int) -> Customer | None:
        result = await self.db.execute(select(Customer).where(Customer.user_id == user_id))
        return result.scalar_one_or_none()

    async def list_with_portal_access(self) -> list[Customer]:
        result = await self.db.execute(
            select(Customer).where(Customer.user_id.is_not(None)).order_by(Customer.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_without_portal_access(self) -> list[Customer]:
        result = await self.db.execute(
            select(Customer)
            .where(Customer.user_id.is_(None))
            .order_by(Customer.first_name, Customer.last_name)
        )
        return list(result.scalars().all())

    async def count_by_status(self) -> dict[CustomerStatus, int]:
        result = await self.db.execute(
            select(Customer.status, func.count(Customer.id)).group_by(Customer.status)
        )
        counts = {status: 0 for status in CustomerStatus}
        for status, total in result.all():
            counts[status] = int(total)
        return counts
