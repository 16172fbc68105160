"""Notification transport that writes messages to the log.

Used when no outbound transport is configured: the message body is the
plain-text line a requester would receive.
"""

import logging

from lendkeep.interfaces.notifier import NotificationPort

logger = logging.getLogger(__name__)

OVERDUE_MESSAGE = "Your rental of '{title}' is overdue. Please return it as soon as possible."
AVAILABLE_MESSAGE = "'{title}' is now available for you to rent."


class LoggingNotifier(NotificationPort):
    """Log each notification at INFO instead of sending it."""

    def notify_overdue(self, contact: str, item_title: str) -> None:
        logger.info(
            "Overdue notice to %s: %s", contact, OVERDUE_MESSAGE.format(title=item_title)
        )

    def notify_available(self, contact: str, item_title: str) -> None:
        logger.info(
            "Availability notice to %s: %s",
            contact,
            AVAILABLE_MESSAGE.format(title=item_title),
        )
