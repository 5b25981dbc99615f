"""Supervision request store."""

from uuid import UUID

from sqlmodel import select

from src.sparkhub.models import RequestStatus, SupervisionRequest
from src.sparkhub.repositories.base import BaseRepository


class SupervisionRequestRepository(BaseRepository[SupervisionRequest]):
    """Repository for SupervisionRequest records. Requests are never deleted."""

    model = SupervisionRequest

    async def get_pending_by_owner(
        self, owner_id: UUID, for_update: bool = False
    ) -> SupervisionRequest | None:
        """Get the owner's outstanding request (at most one exists)."""
        query = select(SupervisionRequest).where(
            SupervisionRequest.owner_id == owner_id,
            SupervisionRequest.status == RequestStatus.PENDING.value,
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_pending_by_idea(
        self, idea_id: UUID, for_update: bool = False
    ) -> SupervisionRequest | None:
        query = select(SupervisionRequest).where(
            SupervisionRequest.idea_id == idea_id,
            SupervisionRequest.status == RequestStatus.PENDING.value,
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_by_owner_paginated(
        self, owner_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[SupervisionRequest], str | None, bool]:
        """Requests sent by an owner, newest first."""
        query = select(SupervisionRequest).where(SupervisionRequest.owner_id == owner_id)
        return await self.paginate(query, cursor, limit, SupervisionRequest.created_at)

    async def list_pending_for_supervisor_paginated(
        self, supervisor_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[SupervisionRequest], str | None, bool]:
        """A supervisor's inbox: requests awaiting their decision, newest first."""
        query = select(SupervisionRequest).where(
            SupervisionRequest.supervisor_id == supervisor_id,
            SupervisionRequest.status == RequestStatus.PENDING.value,
        )
        return await self.paginate(query, cursor, limit, SupervisionRequest.created_at)

    async def supervisor_has_request_for_idea(self, supervisor_id: UUID, idea_id: UUID) -> bool:
        """Whether the supervisor was ever asked to review this idea."""
        result = await self.session.execute(
            select(SupervisionRequest.id)
            .where(
                SupervisionRequest.supervisor_id == supervisor_id,
                SupervisionRequest.idea_id == idea_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None
