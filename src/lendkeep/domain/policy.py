"""Lending policy: loan period and extension cap."""

from dataclasses import dataclass
from datetime import timedelta

DEFAULT_LOAN_PERIOD_DAYS = 14
DEFAULT_MAX_EXTENSIONS = 2


@dataclass(frozen=True)
class LendingPolicy:
    """Rules applied when opening and extending rentals.

    Attributes:
        loan_period_days: Days between checkout and the initial due date.
        max_extensions: How many times a single rental may be extended.
    """

    loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS
    max_extensions: int = DEFAULT_MAX_EXTENSIONS

    @property
    def loan_period(self) -> timedelta:
        """Loan period as a timedelta."""
        return timedelta(days=self.loan_period_days)
