"""Database layer for payables application."""

from payables.database.base import Database
from payables.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
