"""Storage layer for cashpilot application."""

from cashpilot.database.base import LedgerStore
from cashpilot.database.factories import create_sqlite_store

__all__ = ["LedgerStore", "create_sqlite_store"]
