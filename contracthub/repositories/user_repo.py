from sqlalchemy import func, select

from contracthub.models.user import User
from contracthub.rbac.permissions import Role
from contracthub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def list_staff(self, active_only: bool = False) -> list[User]:
        """Every non-customer user, newest first."""
        stmt = select(User).where(User.role != Role.CUSTOMER)
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        result = await self.db.execute(stmt.order_by(User.created_at.desc()))
        return list(result.scalars().all())
