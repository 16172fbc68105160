"""Notification transports implementing `NotificationPort`."""

from .logging_notifier import LoggingNotifier
from .memory import InMemoryNotifier, NotificationKind, SentNotification

__all__ = [
    "InMemoryNotifier",
    "LoggingNotifier",
    "NotificationKind",
    "SentNotification",
]
