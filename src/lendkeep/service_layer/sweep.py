"""Overdue sweep: a recurring background task.

Each cycle reads the open rentals past their due date and sends one overdue
notice per rental. The sweep only reads; it never changes rentals or items.

State machine per cycle: IDLE -> SCANNING -> NOTIFYING -> IDLE.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from lendkeep.domain.models import Rental
from lendkeep.interfaces.clock import Clock
from lendkeep.interfaces.notifier import NotificationPort
from lendkeep.interfaces.unit_of_work import AbstractUnitOfWork

from .ledger import RentalLedger

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 3600.0


class SweepState(Enum):
    """Where the sweep is within a cycle."""

    IDLE = "idle"
    SCANNING = "scanning"
    NOTIFYING = "notifying"


class SweepAlreadyRunningError(RuntimeError):
    """Raised when a cycle is requested while another one is in progress."""

    def __init__(self) -> None:
        super().__init__("An overdue sweep cycle is already running")


@dataclass(frozen=True)
class OverdueNotice:
    """An overdue rental resolved to its recipient and item title."""

    rental: Rental
    contact: str
    item_title: str


@dataclass
class SweepReport:
    """Counters for one sweep cycle.

    `failed` counts rentals that could not be notified, either because the
    transport raised or because the requester or item no longer resolves.
    `abandoned` is True when a stop request cut the cycle short.
    """

    overdue: int = 0
    notified: int = 0
    failed: int = 0
    abandoned: bool = False


class OverdueSweep:
    """Cancellable, non-reentrant timer loop sending overdue notices.

    Args:
        uow_factory: Returns a fresh unit of work for each scan.
        notifier: Transport for overdue notices.
        clock: Source of "now" when deciding what is overdue.
        interval: Seconds to wait between the end of one cycle and the next.
    """

    def __init__(
        self,
        uow_factory: Callable[[], AbstractUnitOfWork],
        notifier: NotificationPort,
        clock: Clock,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.uow_factory = uow_factory
        self.notifier = notifier
        self.clock = clock
        self.interval = interval
        self.state = SweepState.IDLE
        self.cycles = 0
        self._stop = threading.Event()
        self._cycle_lock = threading.Lock()
        self._thread: threading.Thread | None = None

    # --- one cycle ---

    def run_cycle(self) -> SweepReport:
        """Scan for overdue rentals and notify each requester once.

        A notification failure is logged and counted; the remaining rentals
        are still processed. A failure while scanning propagates.

        Raises:
            SweepAlreadyRunningError: If another cycle is in progress.
        """
        if not self._cycle_lock.acquire(blocking=False):  # pylint: disable=consider-using-with
            raise SweepAlreadyRunningError
        try:
            self.state = SweepState.SCANNING
            notices, unresolved = self._scan()
            report = SweepReport(overdue=len(notices) + unresolved, failed=unresolved)

            self.state = SweepState.NOTIFYING
            for notice in notices:
                if self._stop.is_set():
                    report.abandoned = True
                    logger.info("Overdue sweep stopping; abandoning current cycle")
                    break
                try:
                    self.notifier.notify_overdue(notice.contact, notice.item_title)
                except Exception:  # pylint: disable=broad-except
                    report.failed += 1
                    logger.exception(
                        "Failed to send overdue notice for rental %s to %s",
                        notice.rental.id,
                        notice.contact,
                    )
                else:
                    report.notified += 1
                    logger.info(
                        "Sent overdue notice to %s for '%s'",
                        notice.contact,
                        notice.item_title,
                    )
            return report
        finally:
            self.cycles += 1
            self.state = SweepState.IDLE
            self._cycle_lock.release()

    def _scan(self) -> tuple[list[OverdueNotice], int]:
        notices: list[OverdueNotice] = []
        unresolved = 0
        with self.uow_factory() as uow:
            for rental in RentalLedger(uow.rentals).overdue(self.clock.now()):
                requester = uow.requesters.get(rental.requester_id)
                item = uow.items.get(rental.item_id)
                if requester is None or item is None:
                    unresolved += 1
                    logger.warning(
                        "Overdue rental %s references a missing requester or item",
                        rental.id,
                    )
                    continue
                notices.append(OverdueNotice(rental, requester.contact, item.title))
        logger.debug("Overdue scan found %s rentals", len(notices) + unresolved)
        return notices, unresolved

    # --- scheduling ---

    def run_forever(self) -> None:
        """Run cycles every `interval` seconds until `stop()` is called.

        A failing cycle is logged and the next one is still scheduled.
        """
        logger.info("Overdue sweep started (interval=%ss)", self.interval)
        while not self._stop.is_set():
            try:
                report = self.run_cycle()
            except Exception:  # pylint: disable=broad-except
                logger.exception("An error occurred while sending overdue notifications")
            else:
                logger.info(
                    "Overdue sweep cycle done: %s overdue, %s notified, %s failed",
                    report.overdue,
                    report.notified,
                    report.failed,
                )
            self._stop.wait(self.interval)
        logger.info("Overdue sweep stopped")

    def start(self) -> None:
        """Run the sweep loop on a background daemon thread."""
        if self.is_running:
            raise SweepAlreadyRunningError
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name="overdue-sweep", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> bool:
        """Request cancellation and wait for the background thread.

        Returns:
            True if the loop has finished, False if `timeout` expired first.
        """
        self._stop.set()
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def is_running(self) -> bool:
        """True while the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> OverdueSweep:
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()
