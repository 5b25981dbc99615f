"""Notification utilities - sink contract, background dispatch, email sink."""

from src.sparkhub.core.notifications.base import (
    NotificationEvent,
    NotificationSink,
    dispatch_notification,
    drain_notifications,
)
from src.sparkhub.core.notifications.email import EmailNotificationSink, render_email

__all__ = [
    "EmailNotificationSink",
    "NotificationEvent",
    "NotificationSink",
    "dispatch_notification",
    "drain_notifications",
    "render_email",
]
