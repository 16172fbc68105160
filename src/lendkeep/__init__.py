"""LENDKEEP

Rental coordination for a lending catalog: checking items out, returning
them, extending due dates within limits, queuing requesters for unavailable
items, and notifying them when an item is overdue or becomes available.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
