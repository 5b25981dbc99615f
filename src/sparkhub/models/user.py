"""User accounts. Owned and written by the main backend, read here."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.sparkhub.models.base import utc_now


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    full_name: str = Field(max_length=100)
    is_active: bool = Field(default=True)
    is_supervisor: bool = Field(default=False, index=True)
    supervisor_title: str | None = Field(default=None, max_length=100)
    supervisor_bio: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)
