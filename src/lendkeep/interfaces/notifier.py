"""Notification port.

The core only needs two fire-and-forget messages: "your item is overdue"
and "the item you waited for is available". Delivery is best-effort; a
transport that cannot deliver raises `TransportError`.
"""

import abc


class TransportError(Exception):
    """Raised by a notification transport that failed to send a message."""

    def __init__(self, contact: str, reason: str) -> None:
        super().__init__(f"Could not notify {contact}: {reason}")
        self.contact = contact
        self.reason = reason


class NotificationPort(abc.ABC):
    """Contract for sending notifications to requesters."""

    @abc.abstractmethod
    def notify_overdue(self, contact: str, item_title: str) -> None:
        """Tell `contact` that their rental of `item_title` is overdue.

        Raises:
            TransportError: If the message could not be sent.
        """

    @abc.abstractmethod
    def notify_available(self, contact: str, item_title: str) -> None:
        """Tell `contact` that `item_title` is available to rent.

        Raises:
            TransportError: If the message could not be sent.
        """
