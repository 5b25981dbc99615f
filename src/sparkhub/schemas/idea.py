"""Idea schemas for API request/response.

Length, enum and URL rules are enforced by the coordinator so that every
caller gets the same per-field messages; these schemas only fix the shape.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class IdeaCreate(BaseModel):
    """Schema for creating an idea."""

    model_config = ConfigDict(extra="forbid")

    title: str
    description: str
    category: str
    problem_statement: str
    solution: str
    target_market: str
    business_model: str | None = None
    images: list[str] = Field(default_factory=list)


class IdeaUpdate(BaseModel):
    """Schema for editing idea content. Status fields are not accepted."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    category: str | None = None
    problem_statement: str | None = None
    solution: str | None = None
    target_market: str | None = None
    business_model: str | None = None
    images: list[str] | None = None


class IdeaRead(BaseModel):
    """Schema for reading an idea."""

    id: UUID
    owner_id: UUID
    status: str
    supervisor_id: UUID | None
    title: str
    description: str
    category: str
    problem_statement: str
    solution: str
    target_market: str
    business_model: str
    images: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
