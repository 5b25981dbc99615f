"""Service factory dependencies."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.sparkhub.api.dependencies.db import DBSession
from src.sparkhub.api.dependencies.repositories import IdeaRepo, SupervisionRequestRepo, UserRepo
from src.sparkhub.core.locks import OwnerLocks, get_owner_locks
from src.sparkhub.core.notifications import EmailNotificationSink, NotificationSink
from src.sparkhub.services.idea_service import IdeaService
from src.sparkhub.services.supervision_coordinator import SupervisionCoordinator
from src.sparkhub.services.user_lookup import DatabaseUserLookup, resolve_contact


@lru_cache
def get_notification_sink() -> NotificationSink:
    """Process-wide email sink."""
    return EmailNotificationSink(resolve_contact=resolve_contact)


def get_user_lookup(user_repo: UserRepo) -> DatabaseUserLookup:
    return DatabaseUserLookup(user_repo)


Notifier = Annotated[NotificationSink, Depends(get_notification_sink)]
OwnerLockRegistry = Annotated[OwnerLocks, Depends(get_owner_locks)]
UserLookupDep = Annotated[DatabaseUserLookup, Depends(get_user_lookup)]


def get_supervision_coordinator(
    idea_repo: IdeaRepo,
    request_repo: SupervisionRequestRepo,
    session: DBSession,
    user_lookup: UserLookupDep,
    notifier: Notifier,
    owner_locks: OwnerLockRegistry,
) -> SupervisionCoordinator:
    """Get the workflow coordinator bound to the request's session."""
    return SupervisionCoordinator(
        idea_repo, request_repo, session, user_lookup, notifier, owner_locks
    )


def get_idea_service(
    idea_repo: IdeaRepo,
    request_repo: SupervisionRequestRepo,
    session: DBSession,
    user_lookup: UserLookupDep,
    owner_locks: OwnerLockRegistry,
) -> IdeaService:
    return IdeaService(idea_repo, request_repo, session, user_lookup, owner_locks)


CoordinatorDep = Annotated[SupervisionCoordinator, Depends(get_supervision_coordinator)]
IdeaServiceDep = Annotated[IdeaService, Depends(get_idea_service)]
