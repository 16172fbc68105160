"""Alembic migration scripts for LENDKEEP."""
