"""Ledger store for constructa."""

from constructa.database.base import Database
from constructa.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
