"""Transition table of the supervision workflow.

The idea's status and the request's status always move together. Each entry
of ``TRANSITIONS`` names the idea status an event applies to and the pair of
statuses it produces; any (status, event) pair not listed is rejected.

    draft          --submit--> pending_review   (request: pending)
    pending_review --accept--> public           (request: accepted)
    pending_review --reject--> draft            (request: rejected)
    pending_review --cancel--> draft            (request: cancelled)

``public`` has no outgoing edge. Deleting an idea is handled separately
because it is allowed from every status.
"""

from dataclasses import dataclass
from enum import Enum

from src.sparkhub.core.exceptions import InvalidStateError
from src.sparkhub.models.enums import Decision, IdeaStatus, RequestStatus


class WorkflowEvent(str, Enum):
    SUBMIT = "submit"
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"

    @classmethod
    def from_decision(cls, decision: Decision) -> "WorkflowEvent":
        return cls.ACCEPT if decision is Decision.ACCEPT else cls.REJECT


@dataclass(frozen=True)
class Transition:
    event: WorkflowEvent
    source: IdeaStatus
    target: IdeaStatus
    request_status: RequestStatus
    assigns_supervisor: bool = False

    @property
    def decides_request(self) -> bool:
        """Whether the transition closes an existing request (sets decided_at)."""
        return self.event is not WorkflowEvent.SUBMIT


TRANSITIONS: dict[tuple[IdeaStatus, WorkflowEvent], Transition] = {
    (IdeaStatus.DRAFT, WorkflowEvent.SUBMIT): Transition(
        event=WorkflowEvent.SUBMIT,
        source=IdeaStatus.DRAFT,
        target=IdeaStatus.PENDING_REVIEW,
        request_status=RequestStatus.PENDING,
    ),
    (IdeaStatus.PENDING_REVIEW, WorkflowEvent.ACCEPT): Transition(
        event=WorkflowEvent.ACCEPT,
        source=IdeaStatus.PENDING_REVIEW,
        target=IdeaStatus.PUBLIC,
        request_status=RequestStatus.ACCEPTED,
        assigns_supervisor=True,
    ),
    (IdeaStatus.PENDING_REVIEW, WorkflowEvent.REJECT): Transition(
        event=WorkflowEvent.REJECT,
        source=IdeaStatus.PENDING_REVIEW,
        target=IdeaStatus.DRAFT,
        request_status=RequestStatus.REJECTED,
    ),
    (IdeaStatus.PENDING_REVIEW, WorkflowEvent.CANCEL): Transition(
        event=WorkflowEvent.CANCEL,
        source=IdeaStatus.PENDING_REVIEW,
        target=IdeaStatus.DRAFT,
        request_status=RequestStatus.CANCELLED,
    ),
}

_INVALID_STATE_MESSAGES: dict[WorkflowEvent, str] = {
    WorkflowEvent.SUBMIT: "Your idea must be a draft to request supervision",
    WorkflowEvent.ACCEPT: "This idea is not awaiting review",
    WorkflowEvent.REJECT: "This idea is not awaiting review",
    WorkflowEvent.CANCEL: "This idea is not awaiting review",
}


def resolve_transition(status: IdeaStatus | str, event: WorkflowEvent) -> Transition:
    """Look up the transition for ``event`` from ``status``.

    Raises:
        InvalidStateError: If the event does not apply in this status.
    """
    transition = TRANSITIONS.get((IdeaStatus(status), event))
    if transition is None:
        raise InvalidStateError(
            _INVALID_STATE_MESSAGES[event],
            idea_status=str(IdeaStatus(status).value),
            workflow_event=event.value,
        )
    return transition
