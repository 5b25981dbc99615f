"""Repository layer - data access abstraction."""

from src.sparkhub.repositories.base import BaseRepository
from src.sparkhub.repositories.idea import IdeaRepository
from src.sparkhub.repositories.supervision_request import SupervisionRequestRepository
from src.sparkhub.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "IdeaRepository",
    "SupervisionRequestRepository",
    "UserRepository",
]
