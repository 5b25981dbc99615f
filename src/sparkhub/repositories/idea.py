"""Idea store."""

from uuid import UUID

from sqlmodel import select

from src.sparkhub.models import Idea, IdeaStatus
from src.sparkhub.repositories.base import BaseRepository


class IdeaRepository(BaseRepository[Idea]):
    """Repository for Idea records."""

    model = Idea

    async def get_by_owner(self, owner_id: UUID, for_update: bool = False) -> Idea | None:
        """Get the owner's idea, if any (one per owner)."""
        query = select(Idea).where(Idea.owner_id == owner_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def delete(self, idea: Idea) -> None:
        """Delete an idea (no commit)."""
        await self.session.delete(idea)

    async def list_public_paginated(
        self, category: str | None, cursor: str | None, limit: int
    ) -> tuple[list[Idea], str | None, bool]:
        """Public Sparks Hub feed, newest first, optionally filtered by category."""
        query = select(Idea).where(Idea.status == IdeaStatus.PUBLIC.value)
        if category:
            query = query.where(Idea.category == category)
        return await self.paginate(query, cursor, limit, Idea.created_at)
