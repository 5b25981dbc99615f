"""Supervision request schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.sparkhub.models import Decision


class SupervisionRequestCreate(BaseModel):
    """Schema for asking a supervisor to review the caller's idea."""

    supervisor_id: UUID
    message: str | None = None


class SupervisionDecision(BaseModel):
    """Schema for a supervisor's answer."""

    decision: Decision
    response_message: str | None = None


class SupervisionRequestRead(BaseModel):
    """Schema for reading a supervision request."""

    id: UUID
    idea_id: UUID
    owner_id: UUID
    supervisor_id: UUID
    status: str
    message: str | None
    response_message: str | None
    created_at: datetime
    decided_at: datetime | None

    model_config = {"from_attributes": True}


class SupervisorRead(BaseModel):
    """Public directory entry for a supervisor."""

    id: UUID
    full_name: str
    supervisor_title: str | None
    supervisor_bio: str | None

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
