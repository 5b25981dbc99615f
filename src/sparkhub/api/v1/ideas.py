"""Idea (Spark) endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.sparkhub.api.dependencies import CoordinatorDep, CurrentUser, IdeaServiceDep
from src.sparkhub.schemas import IdeaCreate, IdeaRead, IdeaUpdate, PaginatedResponse

router = APIRouter(prefix="/ideas", tags=["ideas"])


@router.post(
    "",
    response_model=IdeaRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create idea",
    description="Create the caller's idea in draft. Each user can have one idea.",
    responses={
        201: {"description": "Idea created"},
        409: {"description": "The caller already has an idea"},
        422: {"description": "Invalid content fields"},
    },
)
async def create_idea(
    request: IdeaCreate,
    current_user: CurrentUser,
    coordinator: CoordinatorDep,
) -> IdeaRead:
    idea = await coordinator.create_idea(current_user.id, request.model_dump(exclude_none=True))
    return IdeaRead.model_validate(idea)


@router.get(
    "",
    response_model=PaginatedResponse[IdeaRead],
    summary="List public ideas",
    description="The Sparks Hub feed: supervised, public ideas, newest first.",
)
async def list_public_ideas(
    _user: CurrentUser,
    idea_service: IdeaServiceDep,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 20,
) -> PaginatedResponse[IdeaRead]:
    ideas, next_cursor, has_more = await idea_service.list_public(category, cursor, limit)
    return PaginatedResponse(
        items=[IdeaRead.model_validate(i) for i in ideas],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/me",
    response_model=IdeaRead,
    summary="Get my idea",
    responses={404: {"description": "The caller has no idea yet"}},
)
async def get_my_idea(current_user: CurrentUser, idea_service: IdeaServiceDep) -> IdeaRead:
    idea = await idea_service.get_my_idea(current_user.id)
    return IdeaRead.model_validate(idea)


@router.get(
    "/{idea_id}",
    response_model=IdeaRead,
    summary="Get idea",
    description=(
        "Public ideas are visible to everyone. Other ideas are visible to their "
        "owner and to supervisors asked to review them."
    ),
    responses={404: {"description": "Idea not found"}},
)
async def get_idea(
    idea_id: UUID,
    current_user: CurrentUser,
    idea_service: IdeaServiceDep,
) -> IdeaRead:
    idea = await idea_service.get_visible_idea(current_user.id, idea_id)
    return IdeaRead.model_validate(idea)


@router.patch(
    "/{idea_id}",
    response_model=IdeaRead,
    summary="Edit idea",
    description="Edit content fields. Status and supervisor cannot be changed here.",
    responses={
        403: {"description": "Not the owner"},
        404: {"description": "Idea not found"},
        422: {"description": "Invalid content fields"},
    },
)
async def update_idea(
    idea_id: UUID,
    request: IdeaUpdate,
    current_user: CurrentUser,
    idea_service: IdeaServiceDep,
) -> IdeaRead:
    idea = await idea_service.update_content(
        current_user.id, idea_id, request.model_dump(exclude_unset=True)
    )
    return IdeaRead.model_validate(idea)


@router.delete(
    "/{idea_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete idea",
    description="Delete the caller's idea. A pending supervision request is cancelled.",
    responses={
        403: {"description": "Not the owner"},
        404: {"description": "Idea not found"},
    },
)
async def delete_idea(
    idea_id: UUID,
    current_user: CurrentUser,
    coordinator: CoordinatorDep,
) -> None:
    await coordinator.delete_idea(current_user.id, idea_id)
