"""Model exports.

Import from here: `from src.sparkhub.models import Idea, SupervisionRequest`
"""

from src.sparkhub.models.enums import (
    BusinessModel,
    Decision,
    IdeaCategory,
    IdeaStatus,
    RequestStatus,
)
from src.sparkhub.models.idea import Idea
from src.sparkhub.models.supervision import SupervisionRequest
from src.sparkhub.models.user import User

__all__ = [
    # Enums
    "BusinessModel",
    "Decision",
    "IdeaCategory",
    "IdeaStatus",
    "RequestStatus",
    # Tables
    "Idea",
    "SupervisionRequest",
    "User",
]
