"""Supervision workflow coordinator.

The only writer of ``Idea.status``, ``Idea.supervisor_id`` and
``SupervisionRequest.status``. Every operation:

1. takes the owner's exclusion scope (``OwnerLocks.hold``),
2. reads the current state of both records and validates the intent,
3. writes both records and commits once,
4. re-reads both records and checks they landed in the expected statuses,
5. schedules notifications in the background.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sparkhub.core.exceptions import (
    AlreadyExistsError,
    ConsistencyError,
    DuplicatePendingError,
    FieldValidationError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    WorkflowError,
)
from src.sparkhub.core.locks import OwnerLocks
from src.sparkhub.core.logging import get_logger
from src.sparkhub.core.metrics import WORKFLOW_TRANSITIONS
from src.sparkhub.core.notifications import (
    NotificationEvent,
    NotificationSink,
    dispatch_notification,
)
from src.sparkhub.core.validators import validate_idea_content, validate_note
from src.sparkhub.models import Decision, Idea, IdeaStatus, RequestStatus, SupervisionRequest
from src.sparkhub.models.base import utc_now
from src.sparkhub.repositories import IdeaRepository, SupervisionRequestRepository
from src.sparkhub.services.transitions import (
    TRANSITIONS,
    Transition,
    WorkflowEvent,
    resolve_transition,
)
from src.sparkhub.services.user_lookup import UserLookup

logger = get_logger(__name__)

_NOTIFICATION_FOR_EVENT: dict[WorkflowEvent, NotificationEvent] = {
    WorkflowEvent.SUBMIT: NotificationEvent.SUPERVISION_REQUESTED,
    WorkflowEvent.ACCEPT: NotificationEvent.REQUEST_ACCEPTED,
    WorkflowEvent.REJECT: NotificationEvent.REQUEST_REJECTED,
    WorkflowEvent.CANCEL: NotificationEvent.REQUEST_CANCELLED,
}

# Deleting an idea closes its pending request the same way a cancel does
_CANCEL = TRANSITIONS[(IdeaStatus.PENDING_REVIEW, WorkflowEvent.CANCEL)]


@dataclass(frozen=True)
class _Snapshot:
    """Statuses of both records before a transition, used for compensation."""

    idea_status: str
    supervisor_id: UUID | None
    request_status: str | None
    decided_at: datetime | None


class SupervisionCoordinator:
    """Drives the idea / supervision request lifecycle."""

    def __init__(
        self,
        idea_repo: IdeaRepository,
        request_repo: SupervisionRequestRepository,
        session: AsyncSession,
        user_lookup: UserLookup,
        notifier: NotificationSink,
        owner_locks: OwnerLocks,
    ):
        self.idea_repo = idea_repo
        self.request_repo = request_repo
        self.session = session
        self.user_lookup = user_lookup
        self.notifier = notifier
        self.owner_locks = owner_locks

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create_idea(self, owner_id: UUID, fields: dict[str, Any]) -> Idea:
        """Create the owner's idea in ``draft``.

        Raises:
            AlreadyExistsError: The owner already has an idea (any status).
            FieldValidationError: Content fields are missing or invalid.
        """
        async with self.owner_locks.hold(owner_id):
            try:
                if await self.idea_repo.get_by_owner(owner_id, for_update=True) is not None:
                    raise AlreadyExistsError(owner_id=str(owner_id))

                cleaned = validate_idea_content(fields)
                idea = Idea(owner_id=owner_id, status=IdeaStatus.DRAFT.value, **cleaned)
                self.idea_repo.add(idea)
                await self._commit(AlreadyExistsError(owner_id=str(owner_id)))

            except WorkflowError:
                await self.session.rollback()
                raise
            except Exception as e:
                await self.session.rollback()
                logger.error("Failed to create idea", owner_id=str(owner_id), error=str(e))
                raise

        logger.info("Idea created", idea_id=str(idea.id), owner_id=str(owner_id))
        return idea

    async def request_supervision(
        self,
        owner_id: UUID,
        supervisor_id: UUID,
        message: str | None = None,
    ) -> SupervisionRequest:
        """Ask a supervisor to review the owner's idea.

        Checks run in this order: idea exists, no pending request, idea is a
        draft, supervisor is not the owner, message length, supervisor exists.

        Raises:
            NotFoundError: No idea, or the supervisor is not an active supervisor.
            DuplicatePendingError: The owner already has a pending request.
            InvalidStateError: The idea is not a draft.
            FieldValidationError: Self-supervision or an over-long message.
        """
        async with self.owner_locks.hold(owner_id):
            try:
                idea = await self.idea_repo.get_by_owner(owner_id, for_update=True)
                if idea is None:
                    raise NotFoundError("Create an idea before requesting supervision")

                if await self.request_repo.get_pending_by_owner(owner_id, for_update=True):
                    raise DuplicatePendingError(owner_id=str(owner_id))

                transition = resolve_transition(idea.status, WorkflowEvent.SUBMIT)

                if supervisor_id == owner_id:
                    raise FieldValidationError(
                        errors={"supervisor_id": "You cannot supervise your own idea"}
                    )
                note = validate_note(message, "message")

                if not await self.user_lookup.is_supervisor(supervisor_id):
                    raise NotFoundError("Supervisor not found", supervisor_id=str(supervisor_id))

                snapshot = self._snapshot(idea, None)
                request = SupervisionRequest(
                    idea_id=idea.id,
                    owner_id=owner_id,
                    supervisor_id=supervisor_id,
                    status=transition.request_status.value,
                    message=note,
                )
                self.request_repo.add(request)
                self._apply_to_idea(idea, transition)
                await self._commit(DuplicatePendingError(owner_id=str(owner_id)))

                await self._verify(idea, request, transition, snapshot)

            except WorkflowError:
                await self.session.rollback()
                raise
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    "Failed to request supervision",
                    owner_id=str(owner_id),
                    supervisor_id=str(supervisor_id),
                    error=str(e),
                )
                raise

        self._record(transition, idea, request)
        self._notify(supervisor_id, transition, idea, request)
        return request

    async def respond_to_request(
        self,
        supervisor_id: UUID,
        request_id: UUID,
        decision: Decision | str,
        response_message: str | None = None,
    ) -> SupervisionRequest:
        """Accept or reject a pending request as its supervisor.

        Raises:
            NotFoundError: The request does not exist.
            ForbiddenError: The caller is not the request's supervisor.
            InvalidStateError: The request is no longer pending.
            FieldValidationError: Unknown decision or an over-long response.
        """
        try:
            decision = Decision(decision)
        except ValueError as e:
            raise FieldValidationError(errors={"decision": "Must be accept or reject"}) from e

        # The owner is only known after reading the request
        found = await self.request_repo.get_by_id(request_id)
        if found is None:
            raise NotFoundError("Supervision request not found")

        async with self.owner_locks.hold(found.owner_id):
            try:
                request = await self._get_request_for_update(request_id)
                if request.supervisor_id != supervisor_id:
                    raise ForbiddenError("Only the requested supervisor can respond")
                if not request.is_pending:
                    raise InvalidStateError(request_status=request.status)
                note = validate_note(response_message, "response_message")

                idea = await self._get_idea_for_request(request)
                transition = resolve_transition(idea.status, WorkflowEvent.from_decision(decision))

                snapshot = self._snapshot(idea, request)
                self._apply_to_idea(idea, transition, supervisor_id)
                self._apply_to_request(request, transition, response_message=note)
                await self._commit(InvalidStateError())

                await self._verify(idea, request, transition, snapshot)

            except WorkflowError:
                await self.session.rollback()
                raise
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    "Failed to respond to supervision request",
                    supervision_request_id=str(request_id),
                    supervisor_id=str(supervisor_id),
                    error=str(e),
                )
                raise

        self._record(transition, idea, request)
        self._notify(request.owner_id, transition, idea, request)
        return request

    async def cancel_request(self, owner_id: UUID, request_id: UUID) -> None:
        """Withdraw the owner's pending request and return the idea to draft.

        Raises:
            NotFoundError: The request does not exist.
            ForbiddenError: The caller does not own the request.
            InvalidStateError: The request is no longer pending.
        """
        found = await self.request_repo.get_by_id(request_id)
        if found is None:
            raise NotFoundError("Supervision request not found")
        if found.owner_id != owner_id:
            raise ForbiddenError("Only the owner can cancel this request")

        async with self.owner_locks.hold(owner_id):
            try:
                request = await self._get_request_for_update(request_id)
                if not request.is_pending:
                    raise InvalidStateError(request_status=request.status)

                idea = await self._get_idea_for_request(request)
                transition = resolve_transition(idea.status, WorkflowEvent.CANCEL)

                snapshot = self._snapshot(idea, request)
                self._apply_to_idea(idea, transition)
                self._apply_to_request(request, transition)
                await self._commit(InvalidStateError())

                await self._verify(idea, request, transition, snapshot)

            except WorkflowError:
                await self.session.rollback()
                raise
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    "Failed to cancel supervision request",
                    supervision_request_id=str(request_id),
                    owner_id=str(owner_id),
                    error=str(e),
                )
                raise

        self._record(transition, idea, request)
        self._notify(request.supervisor_id, transition, idea, request)

    async def delete_idea(self, owner_id: UUID, idea_id: UUID) -> None:
        """Delete the owner's idea in any status.

        A pending request for the idea is cancelled in the same transaction.

        Raises:
            NotFoundError: The idea does not exist.
            ForbiddenError: The caller does not own the idea.
        """
        found = await self.idea_repo.get_by_id(idea_id)
        if found is None:
            raise NotFoundError("Idea not found")
        if found.owner_id != owner_id:
            raise ForbiddenError("Only the owner can delete this idea")

        pending: SupervisionRequest | None = None
        async with self.owner_locks.hold(owner_id):
            try:
                idea = await self.idea_repo.get_by_id(idea_id, for_update=True)
                if idea is None:
                    raise NotFoundError("Idea not found")

                pending = await self.request_repo.get_pending_by_idea(idea.id, for_update=True)
                if pending is not None:
                    self._apply_to_request(pending, _CANCEL)
                await self.idea_repo.delete(idea)
                await self.session.commit()

                await self._verify_deleted(idea, pending)

            except WorkflowError:
                await self.session.rollback()
                raise
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    "Failed to delete idea",
                    idea_id=str(idea_id),
                    owner_id=str(owner_id),
                    error=str(e),
                )
                raise

        WORKFLOW_TRANSITIONS.labels(event="delete").inc()
        logger.info(
            "Idea deleted",
            idea_id=str(idea.id),
            owner_id=str(owner_id),
            cancelled_request_id=str(pending.id) if pending else None,
        )
        if pending is not None:
            self._notify(pending.supervisor_id, _CANCEL, idea, pending)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_request_for_update(self, request_id: UUID) -> SupervisionRequest:
        request = await self.request_repo.get_by_id(request_id, for_update=True)
        if request is None:
            raise NotFoundError("Supervision request not found")
        return request

    async def _get_idea_for_request(self, request: SupervisionRequest) -> Idea:
        idea = await self.idea_repo.get_by_id(request.idea_id, for_update=True)
        if idea is None:
            # A pending request must always point at a live idea
            raise ConsistencyError(
                "Pending request references a missing idea",
                supervision_request_id=str(request.id),
                idea_id=str(request.idea_id),
            )
        return idea

    def _snapshot(self, idea: Idea, request: SupervisionRequest | None) -> _Snapshot:
        return _Snapshot(
            idea_status=idea.status,
            supervisor_id=idea.supervisor_id,
            request_status=request.status if request else None,
            decided_at=request.decided_at if request else None,
        )

    def _apply_to_idea(
        self, idea: Idea, transition: Transition, supervisor_id: UUID | None = None
    ) -> None:
        fields: dict[str, Any] = {"status": transition.target.value, "updated_at": utc_now()}
        if transition.assigns_supervisor:
            fields["supervisor_id"] = supervisor_id
        self.idea_repo.update(idea, fields)

    def _apply_to_request(
        self,
        request: SupervisionRequest,
        transition: Transition,
        response_message: str | None = None,
    ) -> None:
        fields: dict[str, Any] = {"status": transition.request_status.value}
        if transition.decides_request:
            fields["decided_at"] = utc_now()
        if response_message is not None:
            fields["response_message"] = response_message
        self.request_repo.update(request, fields)

    async def _commit(self, conflict: WorkflowError) -> None:
        """Commit both writes; a unique-index violation maps to ``conflict``."""
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise conflict from e

    async def _verify(
        self,
        idea: Idea,
        request: SupervisionRequest,
        transition: Transition,
        snapshot: _Snapshot,
    ) -> None:
        """Re-read both records after commit and repair a half-applied transition.

        Raises:
            ConsistencyError: If the stored statuses do not match the transition.
        """
        stored_idea = await self.idea_repo.reload(idea.id)
        stored_request = await self.request_repo.reload(request.id)

        problems: list[str] = []
        if stored_idea is None:
            problems.append("idea missing")
        elif stored_idea.status != transition.target.value:
            problems.append(f"idea status is {stored_idea.status}")
        elif transition.assigns_supervisor and stored_idea.supervisor_id != request.supervisor_id:
            problems.append("idea supervisor not assigned")
        if stored_request is None:
            problems.append("request missing")
        elif stored_request.status != transition.request_status.value:
            problems.append(f"request status is {stored_request.status}")

        if not problems:
            return

        logger.error(
            "Transition partially applied, compensating",
            workflow_event=transition.event.value,
            idea_id=str(idea.id),
            supervision_request_id=str(request.id),
            problems=problems,
        )
        await self._compensate(stored_idea, stored_request, transition, snapshot)
        raise ConsistencyError(
            idea_id=str(idea.id),
            supervision_request_id=str(request.id),
            workflow_event=transition.event.value,
            problems=problems,
        )

    async def _compensate(
        self,
        idea: Idea | None,
        request: SupervisionRequest | None,
        transition: Transition,
        snapshot: _Snapshot,
    ) -> None:
        """Put both records back to their statuses before ``transition``.

        A request created by the failed submit cannot be un-created, so it is
        closed as cancelled instead.
        """
        now = utc_now()
        if idea is not None:
            self.idea_repo.update(
                idea,
                {
                    "status": snapshot.idea_status,
                    "supervisor_id": snapshot.supervisor_id,
                    "updated_at": now,
                },
            )
        if request is not None:
            if snapshot.request_status is None:
                fields = {"status": RequestStatus.CANCELLED.value, "decided_at": now}
            else:
                fields = {"status": snapshot.request_status, "decided_at": snapshot.decided_at}
            self.request_repo.update(request, fields)
        try:
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.critical(
                "Compensation failed, manual repair required",
                alert=True,
                workflow_event=transition.event.value,
                idea_id=str(idea.id) if idea else None,
                supervision_request_id=str(request.id) if request else None,
                error=str(e),
            )

    async def _verify_deleted(self, idea: Idea, pending: SupervisionRequest | None) -> None:
        problems: list[str] = []
        if await self.idea_repo.reload(idea.id) is not None:
            problems.append("idea still stored")
        if pending is not None:
            stored_request = await self.request_repo.reload(pending.id)
            if stored_request is not None and stored_request.is_pending:
                problems.append("request still pending")
        if problems:
            raise ConsistencyError(
                idea_id=str(idea.id),
                supervision_request_id=str(pending.id) if pending else None,
                workflow_event="delete",
                problems=problems,
            )

    def _record(self, transition: Transition, idea: Idea, request: SupervisionRequest) -> None:
        WORKFLOW_TRANSITIONS.labels(event=transition.event.value).inc()
        logger.info(
            "Supervision transition committed",
            workflow_event=transition.event.value,
            idea_id=str(idea.id),
            supervision_request_id=str(request.id),
            idea_status=transition.target.value,
            request_status=transition.request_status.value,
        )

    def _notify(
        self,
        recipient_id: UUID,
        transition: Transition,
        idea: Idea,
        request: SupervisionRequest,
    ) -> None:
        payload: dict[str, Any] = {
            "request_id": str(request.id),
            "idea_id": str(idea.id),
            "idea_title": idea.title,
            "owner_id": str(request.owner_id),
            "supervisor_id": str(request.supervisor_id),
        }
        if transition.event is WorkflowEvent.SUBMIT and request.message:
            payload["message"] = request.message
        if transition.decides_request and request.response_message:
            payload["response_message"] = request.response_message
        dispatch_notification(
            self.notifier, recipient_id, _NOTIFICATION_FOR_EVENT[transition.event], payload
        )
