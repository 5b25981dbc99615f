from src.sparkhub.schemas.idea import IdeaCreate, IdeaRead, IdeaUpdate
from src.sparkhub.schemas.pagination import PaginatedResponse
from src.sparkhub.schemas.supervision import (
    MessageResponse,
    SupervisionDecision,
    SupervisionRequestCreate,
    SupervisionRequestRead,
    SupervisorRead,
)

__all__ = [
    # Idea
    "IdeaCreate",
    "IdeaRead",
    "IdeaUpdate",
    # Pagination
    "PaginatedResponse",
    # Supervision
    "MessageResponse",
    "SupervisionDecision",
    "SupervisionRequestCreate",
    "SupervisionRequestRead",
    "SupervisorRead",
]
