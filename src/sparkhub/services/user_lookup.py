"""User lookup - resolves supervisors and contact details from the users table."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from src.sparkhub.core.db import get_session
from src.sparkhub.models import User
from src.sparkhub.repositories import UserRepository


@dataclass(frozen=True)
class UserContact:
    user_id: UUID
    email: str
    full_name: str


class UserLookup(Protocol):
    async def is_supervisor(self, user_id: UUID) -> bool: ...

    async def get_contact(self, user_id: UUID) -> UserContact | None: ...


class DatabaseUserLookup:
    """UserLookup backed by the shared users table."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def _get_active(self, user_id: UUID) -> User | None:
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return user

    async def is_supervisor(self, user_id: UUID) -> bool:
        user = await self._get_active(user_id)
        return user is not None and user.is_supervisor

    async def get_contact(self, user_id: UUID) -> UserContact | None:
        user = await self._get_active(user_id)
        if user is None:
            return None
        return UserContact(user_id=user.id, email=user.email, full_name=user.full_name)

    async def list_supervisors(self) -> list[User]:
        return await self.user_repo.list_active_supervisors()


async def resolve_contact(user_id: UUID) -> UserContact | None:
    """Look up a contact in a session of its own.

    Notifications are delivered after the request's session is closed.
    """
    async with get_session() as session:
        return await DatabaseUserLookup(UserRepository(session)).get_contact(user_id)
