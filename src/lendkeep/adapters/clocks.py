"""Clocks for LENDKEEP."""

from datetime import datetime, timezone

from lendkeep.interfaces.clock import Clock

# pylint: disable=too-few-public-methods


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
