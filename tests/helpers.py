"""Test helper functions for common data creation patterns."""

from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar
from uuid import UUID

from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.sparkhub.core.config import get_settings
from src.sparkhub.core.notifications import NotificationEvent
from src.sparkhub.models import User
from tests.factories import UserFactory


class RecordingSink:
    """NotificationSink that keeps every delivery in memory."""

    def __init__(self) -> None:
        self.calls: list[tuple[UUID, NotificationEvent, dict[str, Any]]] = []

    async def notify(
        self, user_id: UUID, event_type: NotificationEvent, payload: dict[str, Any]
    ) -> None:
        self.calls.append((user_id, event_type, payload))

    def events_for(self, user_id: UUID) -> list[NotificationEvent]:
        return [event for uid, event, _ in self.calls if uid == user_id]


class FailingSink:
    """NotificationSink whose deliveries always fail."""

    async def notify(
        self, user_id: UUID, event_type: NotificationEvent, payload: dict[str, Any]
    ) -> None:
        raise ConnectionError("mail relay unreachable")


def idea_fields(**overrides: Any) -> dict[str, Any]:
    """Valid content for CreateIdea."""
    fields: dict[str, Any] = {
        "title": "Solar Backpack",
        "description": "A backpack that charges your phone while you walk.",
        "category": "Technology",
        "problem_statement": "Students run out of battery between classes.",
        "solution": "Flexible solar panels sewn into the backpack.",
        "target_market": "University students",
        "business_model": "E-commerce",
        "images": ["https://cdn.example.com/sparks/backpack.png"],
    }
    fields.update(overrides)
    return fields


async def create_user(session: AsyncSession, **user_kwargs: Any) -> User:
    """Persist a user built by UserFactory and commit."""
    user = UserFactory.build(**user_kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_supervisor(session: AsyncSession, **user_kwargs: Any) -> User:
    user = UserFactory.supervisor(**user_kwargs)
    session.add(user)
    await session.commit()
    return user


def create_access_token(user_id: UUID | str, expires_minutes: int = 15, **claims: Any) -> str:
    """Mint an access token the way the main backend's auth service does."""
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "type": "access",
        "exp": datetime.now(UTC) + timedelta(minutes=expires_minutes),
        **claims,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def auth_headers(user_id: UUID | str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


T = TypeVar("T")


async def load(
    session_factory: async_sessionmaker[AsyncSession], model: type[T], id: UUID
) -> T | None:
    """Read a row in a fresh session, bypassing any identity map in the test."""
    async with session_factory() as session:
        return await session.get(model, id)
