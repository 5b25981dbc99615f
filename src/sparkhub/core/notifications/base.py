"""Notification sink contract and fire-and-forget dispatch."""

import asyncio
from enum import Enum
from typing import Any, Protocol
from uuid import UUID

from src.sparkhub.core.logging import get_logger
from src.sparkhub.core.metrics import NOTIFICATION_FAILURES

logger = get_logger(__name__)


class NotificationEvent(str, Enum):
    SUPERVISION_REQUESTED = "supervision_requested"
    REQUEST_ACCEPTED = "request_accepted"
    REQUEST_REJECTED = "request_rejected"
    REQUEST_CANCELLED = "request_cancelled"


class NotificationSink(Protocol):
    async def notify(
        self, user_id: UUID, event_type: NotificationEvent, payload: dict[str, Any]
    ) -> None: ...


# Strong references so pending deliveries are not garbage collected
_pending: set[asyncio.Task[None]] = set()


async def _deliver(
    sink: NotificationSink,
    user_id: UUID,
    event_type: NotificationEvent,
    payload: dict[str, Any],
) -> None:
    try:
        await sink.notify(user_id, event_type, payload)
    except Exception as e:
        NOTIFICATION_FAILURES.labels(event=event_type.value).inc()
        logger.error(
            "Notification delivery failed",
            user_id=str(user_id),
            event_type=event_type.value,
            error=str(e),
        )


def dispatch_notification(
    sink: NotificationSink,
    user_id: UUID,
    event_type: NotificationEvent,
    payload: dict[str, Any],
) -> None:
    """Schedule delivery in the background and return immediately.

    Failures are logged and counted, never raised to the caller.
    """
    task = asyncio.create_task(_deliver(sink, user_id, event_type, payload))
    _pending.add(task)
    task.add_done_callback(_pending.discard)


async def drain_notifications(timeout: float) -> bool:
    """Wait for scheduled deliveries to finish. Returns False on timeout."""
    if not _pending:
        return True
    _, still_running = await asyncio.wait(set(_pending), timeout=timeout)
    if still_running:
        logger.warning("Notifications still in flight at shutdown", count=len(still_running))
        return False
    return True
