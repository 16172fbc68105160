"""Service layer for LENDKEEP.

Rental coordination (ledger, waiting list, coordinator), catalog
registration, and the overdue sweep background task.
"""

from .coordinator import RentalCoordinator
from .ledger import RentalLedger
from .sweep import OverdueSweep, SweepReport, SweepState
from .waiting_list import WaitingListQueue

__all__ = [
    "OverdueSweep",
    "RentalCoordinator",
    "RentalLedger",
    "SweepReport",
    "SweepState",
    "WaitingListQueue",
]
