"""Idea (Spark) model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.sparkhub.models.base import utc_now
from src.sparkhub.models.enums import BusinessModel, IdeaStatus


class Idea(SQLModel, table=True):
    """A user's startup idea. One per owner."""

    __tablename__ = "ideas"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(unique=True, index=True)
    status: str = Field(default=IdeaStatus.DRAFT.value, max_length=20, index=True)
    supervisor_id: UUID | None = Field(default=None, index=True)

    title: str = Field(max_length=100)
    description: str = Field(max_length=500)
    category: str = Field(max_length=50, index=True)
    problem_statement: str = Field(max_length=1000)
    solution: str = Field(max_length=1000)
    target_market: str = Field(max_length=500)
    business_model: str = Field(default=BusinessModel.NOT_SURE_YET.value, max_length=50)
    images: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_public(self) -> bool:
        return self.status == IdeaStatus.PUBLIC.value
