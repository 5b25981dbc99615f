"""Supervisor directory."""

from fastapi import APIRouter

from src.sparkhub.api.dependencies import CurrentUser, IdeaServiceDep
from src.sparkhub.schemas import SupervisorRead

router = APIRouter(prefix="/supervisors", tags=["supervision"])


@router.get(
    "",
    response_model=list[SupervisorRead],
    summary="List supervisors",
    description="Active users who can be asked to supervise an idea.",
)
async def list_supervisors(
    _user: CurrentUser,
    idea_service: IdeaServiceDep,
) -> list[SupervisorRead]:
    supervisors = await idea_service.list_supervisors()
    return [SupervisorRead.model_validate(s) for s in supervisors]
