"""Adapters (infrastructure) for LENDKEEP.

Concrete implementations of the ports defined in `lendkeep.interfaces`:
in-memory and SQLAlchemy stores and units of work, database helpers and
migrations, clocks, ID generators and notification transports.
"""
