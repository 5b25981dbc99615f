"""Supervision request model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from src.sparkhub.models.base import utc_now
from src.sparkhub.models.enums import RequestStatus

_PENDING_ONLY = text("status = 'pending'")


class SupervisionRequest(SQLModel, table=True):
    """One owner's ask for one supervisor's review of their idea.

    ``idea_id`` is deliberately not a foreign key: decided and cancelled
    requests are kept after the idea itself is deleted.
    """

    __tablename__ = "supervision_requests"
    __table_args__ = (
        # At most one pending request per owner
        Index(
            "uq_supervision_requests_owner_pending",
            "owner_id",
            unique=True,
            postgresql_where=_PENDING_ONLY,
            sqlite_where=_PENDING_ONLY,
        ),
        Index("ix_supervision_requests_supervisor_status", "supervisor_id", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    idea_id: UUID = Field(index=True)
    owner_id: UUID = Field(index=True)
    supervisor_id: UUID
    status: str = Field(default=RequestStatus.PENDING.value, max_length=20)
    message: str | None = Field(default=None, max_length=500)
    response_message: str | None = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    decided_at: datetime | None = Field(default=None)

    @property
    def is_pending(self) -> bool:
        return not RequestStatus(self.status).is_terminal
