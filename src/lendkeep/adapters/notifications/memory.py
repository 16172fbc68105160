"""In-memory notification transport for testing purposes."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum

from lendkeep.interfaces.notifier import NotificationPort, TransportError


class NotificationKind(Enum):
    """Which message was sent."""

    OVERDUE = "overdue"
    AVAILABLE = "available"


@dataclass(frozen=True)
class SentNotification:
    """A notification accepted by the transport."""

    kind: NotificationKind
    contact: str
    item_title: str


class InMemoryNotifier(NotificationPort):
    """Record notifications instead of sending them.

    Args:
        failing_contacts: Contacts for which every send raises `TransportError`.
    """

    def __init__(self, failing_contacts: set[str] | None = None) -> None:
        self.sent: list[SentNotification] = []
        self.failing_contacts = set(failing_contacts or ())
        self._lock = threading.Lock()

    def _send(self, kind: NotificationKind, contact: str, item_title: str) -> None:
        if contact in self.failing_contacts:
            raise TransportError(contact, "contact rejected by transport")
        with self._lock:
            self.sent.append(SentNotification(kind, contact, item_title))

    def notify_overdue(self, contact: str, item_title: str) -> None:
        self._send(NotificationKind.OVERDUE, contact, item_title)

    def notify_available(self, contact: str, item_title: str) -> None:
        self._send(NotificationKind.AVAILABLE, contact, item_title)

    def sent_of(self, kind: NotificationKind) -> list[SentNotification]:
        """Return the recorded notifications of one kind, in send order."""
        with self._lock:
            return [n for n in self.sent if n.kind is kind]
