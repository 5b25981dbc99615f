"""Email notification sink using the Resend API."""

import asyncio
import html
from collections.abc import Awaitable, Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Protocol
from uuid import UUID

import resend

from src.sparkhub.core.config import get_settings
from src.sparkhub.core.logging import get_logger
from src.sparkhub.core.notifications.base import NotificationEvent

logger = get_logger(__name__)

_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #2563eb; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_QUOTE_STYLE = "border-left: 3px solid #2563eb; padding-left: 12px; color: #555;"


class Recipient(Protocol):
    email: str
    full_name: str


ContactResolver = Callable[[UUID], Awaitable[Recipient | None]]


def render_email(
    event_type: NotificationEvent, name: str, payload: dict[str, Any]
) -> tuple[str, str]:
    """Build (subject, html) for a workflow event."""
    settings = get_settings()
    title = html.escape(str(payload.get("idea_title", "your idea")))
    safe_name = html.escape(name)
    note = payload.get("message") or payload.get("response_message")
    note_html = f'<p style="{_QUOTE_STYLE}">"{html.escape(note)}"</p>' if note else ""

    if event_type is NotificationEvent.SUPERVISION_REQUESTED:
        owner = html.escape(str(payload.get("owner_name", "A member")))
        link = f"{settings.app_url}/sparks/requests/{payload.get('request_id')}"
        subject = "New Supervision Request - Sparks Hub"
        body = (
            f"<p>Hi <strong>{safe_name}</strong>,</p>"
            f"<p><strong>{owner}</strong> has requested your supervision for "
            f"<strong>{title}</strong>.</p>{note_html}"
            f'<p><a href="{link}" style="{_BUTTON_STYLE}">Review request</a></p>'
            "<p>Once you approve, the project becomes public in the Sparks Hub "
            "and you are listed as its supervisor.</p>"
        )
    elif event_type is NotificationEvent.REQUEST_ACCEPTED:
        subject = "Your Spark is now public"
        body = (
            f"<p>Hi <strong>{safe_name}</strong>,</p>"
            f"<p>Your supervision request for <strong>{title}</strong> was accepted. "
            f"Your idea is now visible in the Sparks Hub.</p>{note_html}"
        )
    elif event_type is NotificationEvent.REQUEST_REJECTED:
        subject = "Update on your supervision request"
        body = (
            f"<p>Hi <strong>{safe_name}</strong>,</p>"
            f"<p>Your supervision request for <strong>{title}</strong> was declined.</p>"
            f"{note_html}<p>You can send a new request to another supervisor.</p>"
        )
    else:
        subject = "Supervision request withdrawn"
        body = (
            f"<p>Hi <strong>{safe_name}</strong>,</p>"
            f"<p>The supervision request for <strong>{title}</strong> was withdrawn "
            "by its owner. No action is needed.</p>"
        )

    return subject, f'<!DOCTYPE html><html><body style="{_BODY_STYLE}">{body}</body></html>'


class EmailNotificationSink:
    """Notifies users by email. Logs instead of sending when no API key is set."""

    def __init__(self, resolve_contact: ContactResolver):
        self.resolve_contact = resolve_contact

    async def notify(
        self, user_id: UUID, event_type: NotificationEvent, payload: dict[str, Any]
    ) -> None:
        settings = get_settings()
        contact = await self.resolve_contact(user_id)
        if contact is None:
            logger.warning(
                "Notification recipient not found",
                user_id=str(user_id),
                event_type=event_type.value,
            )
            return

        if event_type is NotificationEvent.SUPERVISION_REQUESTED and "owner_id" in payload:
            owner = await self.resolve_contact(UUID(payload["owner_id"]))
            if owner is not None:
                payload = {**payload, "owner_name": owner.full_name}

        subject, body = render_email(event_type, contact.full_name, payload)

        if not settings.resend_api_key:
            logger.warning(
                "RESEND_API_KEY not set - email not sent",
                user_id=str(user_id),
                event_type=event_type.value,
            )
            return

        resend.api_key = settings.resend_api_key

        def _send() -> None:
            resend.Emails.send(
                {
                    "from": settings.email_from,
                    "to": [contact.email],
                    "subject": subject,
                    "html": body,
                }
            )

        loop = asyncio.get_running_loop()
        await asyncio.wait_for(
            loop.run_in_executor(_email_executor, _send),
            timeout=settings.email_send_timeout_seconds,
        )
        logger.info("Notification email sent", user_id=str(user_id), event_type=event_type.value)
