"""Read access to user accounts."""

from sqlmodel import select

from src.sparkhub.models import User
from src.sparkhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    model = User

    async def list_active_supervisors(self) -> list[User]:
        result = await self.session.execute(
            select(User)
            .where(
                User.is_supervisor == True,  # noqa: E712
                User.is_active == True,  # noqa: E712
            )
            .order_by(User.full_name)
        )
        return list(result.scalars().all())
