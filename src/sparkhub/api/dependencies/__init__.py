"""FastAPI dependency injection definitions."""

# Auth
from src.sparkhub.api.dependencies.auth import CurrentUser, get_current_user

# Database
from src.sparkhub.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.sparkhub.api.dependencies.repositories import (
    IdeaRepo,
    SupervisionRequestRepo,
    UserRepo,
    get_idea_repository,
    get_supervision_request_repository,
    get_user_repository,
)

# Services
from src.sparkhub.api.dependencies.services import (
    CoordinatorDep,
    IdeaServiceDep,
    Notifier,
    OwnerLockRegistry,
    get_idea_service,
    get_notification_sink,
    get_supervision_coordinator,
    get_user_lookup,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentUser",
    "get_current_user",
    # Repositories
    "IdeaRepo",
    "SupervisionRequestRepo",
    "UserRepo",
    "get_idea_repository",
    "get_supervision_request_repository",
    "get_user_repository",
    # Services
    "CoordinatorDep",
    "IdeaServiceDep",
    "Notifier",
    "OwnerLockRegistry",
    "get_idea_service",
    "get_notification_sink",
    "get_supervision_coordinator",
    "get_user_lookup",
]
