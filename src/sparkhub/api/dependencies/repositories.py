"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.sparkhub.api.dependencies.db import DBSession
from src.sparkhub.repositories import (
    IdeaRepository,
    SupervisionRequestRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_idea_repository(session: DBSession) -> IdeaRepository:
    return IdeaRepository(session)


def get_supervision_request_repository(session: DBSession) -> SupervisionRequestRepository:
    return SupervisionRequestRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
IdeaRepo = Annotated[IdeaRepository, Depends(get_idea_repository)]
SupervisionRequestRepo = Annotated[
    SupervisionRequestRepository, Depends(get_supervision_request_repository)
]
