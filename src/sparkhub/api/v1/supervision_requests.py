"""Supervision request endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.sparkhub.api.dependencies import CoordinatorDep, CurrentUser, IdeaServiceDep
from src.sparkhub.schemas import (
    MessageResponse,
    PaginatedResponse,
    SupervisionDecision,
    SupervisionRequestCreate,
    SupervisionRequestRead,
)

router = APIRouter(prefix="/supervision-requests", tags=["supervision"])


@router.post(
    "",
    response_model=SupervisionRequestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request supervision",
    description="Ask a supervisor to review the caller's draft idea.",
    responses={
        201: {"description": "Request sent, idea is now pending review"},
        404: {"description": "No idea, or unknown supervisor"},
        409: {"description": "A request is already pending, or the idea is not a draft"},
        422: {"description": "Invalid supervisor or message"},
        503: {"description": "Another change for this owner is in progress"},
    },
)
async def request_supervision(
    request: SupervisionRequestCreate,
    current_user: CurrentUser,
    coordinator: CoordinatorDep,
) -> SupervisionRequestRead:
    created = await coordinator.request_supervision(
        current_user.id, request.supervisor_id, request.message
    )
    return SupervisionRequestRead.model_validate(created)


@router.get(
    "/mine",
    response_model=PaginatedResponse[SupervisionRequestRead],
    summary="List my requests",
    description="Requests the caller has sent, newest first, in every status.",
)
async def list_my_requests(
    current_user: CurrentUser,
    idea_service: IdeaServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 20,
) -> PaginatedResponse[SupervisionRequestRead]:
    requests, next_cursor, has_more = await idea_service.list_my_requests(
        current_user.id, cursor, limit
    )
    return PaginatedResponse(
        items=[SupervisionRequestRead.model_validate(r) for r in requests],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/inbox",
    response_model=PaginatedResponse[SupervisionRequestRead],
    summary="Supervisor inbox",
    description="Pending requests addressed to the calling supervisor, newest first.",
    responses={403: {"description": "The caller is not a supervisor"}},
)
async def list_inbox(
    current_user: CurrentUser,
    idea_service: IdeaServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 20,
) -> PaginatedResponse[SupervisionRequestRead]:
    requests, next_cursor, has_more = await idea_service.list_inbox(
        current_user.id, cursor, limit
    )
    return PaginatedResponse(
        items=[SupervisionRequestRead.model_validate(r) for r in requests],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "/{request_id}/respond",
    response_model=SupervisionRequestRead,
    summary="Respond to request",
    description="Accept (idea becomes public) or reject (idea returns to draft).",
    responses={
        403: {"description": "Not the requested supervisor"},
        404: {"description": "Request not found"},
        409: {"description": "The request is no longer pending"},
    },
)
async def respond_to_request(
    request_id: UUID,
    request: SupervisionDecision,
    current_user: CurrentUser,
    coordinator: CoordinatorDep,
) -> SupervisionRequestRead:
    updated = await coordinator.respond_to_request(
        current_user.id, request_id, request.decision, request.response_message
    )
    return SupervisionRequestRead.model_validate(updated)


@router.post(
    "/{request_id}/cancel",
    response_model=MessageResponse,
    summary="Cancel request",
    description="Withdraw a pending request. The idea returns to draft.",
    responses={
        403: {"description": "Not the owner"},
        404: {"description": "Request not found"},
        409: {"description": "The request is no longer pending"},
    },
)
async def cancel_request(
    request_id: UUID,
    current_user: CurrentUser,
    coordinator: CoordinatorDep,
) -> MessageResponse:
    await coordinator.cancel_request(current_user.id, request_id)
    return MessageResponse(message="Supervision request cancelled")
