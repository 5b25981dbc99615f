"""Idea reads, content edits and listings.

Status fields are never touched here; they belong to the supervision
coordinator.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.sparkhub.core.exceptions import (
    FieldValidationError,
    ForbiddenError,
    NotFoundError,
    WorkflowError,
)
from src.sparkhub.core.locks import OwnerLocks
from src.sparkhub.core.logging import get_logger
from src.sparkhub.core.validators import validate_idea_content
from src.sparkhub.models import Idea, IdeaCategory, SupervisionRequest, User
from src.sparkhub.models.base import utc_now
from src.sparkhub.repositories import IdeaRepository, SupervisionRequestRepository
from src.sparkhub.services.user_lookup import DatabaseUserLookup

logger = get_logger(__name__)


class IdeaService:
    """Service for idea content and the read side of the workflow."""

    def __init__(
        self,
        idea_repo: IdeaRepository,
        request_repo: SupervisionRequestRepository,
        session: AsyncSession,
        user_lookup: DatabaseUserLookup,
        owner_locks: OwnerLocks,
    ):
        self.idea_repo = idea_repo
        self.request_repo = request_repo
        self.session = session
        self.user_lookup = user_lookup
        self.owner_locks = owner_locks

    async def get_my_idea(self, owner_id: UUID) -> Idea:
        idea = await self.idea_repo.get_by_owner(owner_id)
        if idea is None:
            raise NotFoundError("You have not created an idea yet")
        return idea

    async def get_visible_idea(self, viewer_id: UUID, idea_id: UUID) -> Idea:
        """Get an idea the viewer is allowed to see.

        Public ideas are visible to everyone. Drafts and ideas under review are
        visible to their owner and to any supervisor who was asked to review
        them. Anything else reads as not found.
        """
        idea = await self.idea_repo.get_by_id(idea_id)
        if idea is None:
            raise NotFoundError("Idea not found")
        if idea.is_public or idea.owner_id == viewer_id:
            return idea
        if await self.request_repo.supervisor_has_request_for_idea(viewer_id, idea.id):
            return idea
        raise NotFoundError("Idea not found")

    async def list_public(
        self, category: str | None, cursor: str | None, limit: int
    ) -> tuple[list[Idea], str | None, bool]:
        if category is not None and category not in IdeaCategory.values():
            raise FieldValidationError(errors={"category": "Please select a valid category"})
        return await self.idea_repo.list_public_paginated(category, cursor, limit)

    async def update_content(self, owner_id: UUID, idea_id: UUID, fields: dict[str, Any]) -> Idea:
        """Edit content fields of the owner's idea in any status.

        While the idea is under review the supervisor sees the latest content.

        Raises:
            NotFoundError: The idea does not exist.
            ForbiddenError: The caller does not own the idea.
            FieldValidationError: A field is invalid, unknown or read-only.
        """
        cleaned = validate_idea_content(fields, partial=True)

        async with self.owner_locks.hold(owner_id):
            try:
                idea = await self.idea_repo.get_by_id(idea_id, for_update=True)
                if idea is None:
                    raise NotFoundError("Idea not found")
                if idea.owner_id != owner_id:
                    raise ForbiddenError("Only the owner can edit this idea")
                if not cleaned:
                    return idea

                self.idea_repo.update(idea, {**cleaned, "updated_at": utc_now()})
                await self.session.commit()

            except WorkflowError:
                await self.session.rollback()
                raise
            except Exception as e:
                await self.session.rollback()
                logger.error("Failed to update idea", idea_id=str(idea_id), error=str(e))
                raise

        logger.info("Idea updated", idea_id=str(idea.id), fields=sorted(cleaned))
        return idea

    async def list_my_requests(
        self, owner_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[SupervisionRequest], str | None, bool]:
        return await self.request_repo.list_by_owner_paginated(owner_id, cursor, limit)

    async def list_inbox(
        self, supervisor_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[SupervisionRequest], str | None, bool]:
        if not await self.user_lookup.is_supervisor(supervisor_id):
            raise ForbiddenError("Only supervisors have a review inbox")
        return await self.request_repo.list_pending_for_supervisor_paginated(
            supervisor_id, cursor, limit
        )

    async def list_supervisors(self) -> list[User]:
        return await self.user_lookup.list_supervisors()
