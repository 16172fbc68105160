"""Per-item FIFO waiting list."""

from __future__ import annotations

import logging
from datetime import datetime

from lendkeep.domain.models import Item, Requester, WaitingListEntry
from lendkeep.interfaces.notifier import NotificationPort, TransportError
from lendkeep.interfaces.store import Store

logger = logging.getLogger(__name__)


class WaitingListQueue:
    """Queue of requesters waiting for checked-out items.

    Entries are ordered per item by `requested_at`; entries requested at the
    same instant keep identity order. Promotion only announces availability,
    it does not reserve the item.

    Args:
        entries: Waiting list store scoped to the caller's unit of work.
        requesters: Requester store used to resolve contacts on promotion.
        notifier: Transport used for availability notices.
    """

    def __init__(
        self,
        entries: Store[WaitingListEntry],
        requesters: Store[Requester],
        notifier: NotificationPort,
    ) -> None:
        self._entries = entries
        self._requesters = requesters
        self._notifier = notifier

    def enqueue(
        self, entry_id: str, item_id: str, requester_id: str, now: datetime
    ) -> WaitingListEntry:
        """Append a request for `item_id` made at `now`."""
        entry = WaitingListEntry(
            id=entry_id, item_id=item_id, requester_id=requester_id, requested_at=now
        )
        self._entries.add(entry)
        logger.info(
            "Requester %s added to the waiting list for item %s", requester_id, item_id
        )
        return entry

    def entries_for(self, item_id: str) -> list[WaitingListEntry]:
        """All entries for `item_id`, first in line first."""
        entries = self._entries.query_all(lambda e: e.item_id == item_id)
        return sorted(entries, key=lambda e: e.queue_key)

    def promote_next(self, item: Item) -> WaitingListEntry | None:
        """Notify the first requester in line for `item` and drop their entry.

        Entries whose requester no longer resolves are dropped and skipped.
        A failed notice, whether a `TransportError` or any other error from
        the transport, is logged and the entry is still removed: delivery is
        best-effort and runs after the return has been committed.

        Returns:
            The promoted entry, or None when nobody is waiting.
        """
        for entry in self.entries_for(item.id):
            requester = self._requesters.get(entry.requester_id)
            if requester is None:
                logger.warning(
                    "Dropping waiting list entry %s: requester %s not found",
                    entry.id,
                    entry.requester_id,
                )
                self._entries.delete(entry.id)
                continue

            try:
                self._notifier.notify_available(requester.contact, item.title)
            except TransportError as e:
                logger.warning(
                    "Availability notice for item %s to requester %s failed: %s",
                    item.id,
                    requester.id,
                    e,
                )
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Availability notice for item %s to requester %s failed",
                    item.id,
                    requester.id,
                )
            else:
                logger.info(
                    "Requester %s notified that item %s is available",
                    requester.id,
                    item.id,
                )
            self._entries.delete(entry.id)
            return entry

        logger.info("No entries in the waiting list for item %s", item.id)
        return None

    def remove_entry(self, item_id: str, requester_id: str) -> WaitingListEntry | None:
        """Remove the earliest entry of `requester_id` for `item_id`, if any."""
        for entry in self.entries_for(item_id):
            if entry.requester_id == requester_id:
                self._entries.delete(entry.id)
                logger.info(
                    "Waiting list entry removed for requester %s and item %s",
                    requester_id,
                    item_id,
                )
                return entry
        logger.debug(
            "No waiting list entry found for requester %s and item %s",
            requester_id,
            item_id,
        )
        return None
