"""Database layer for doppik application."""

from doppik.database.base import Database
from doppik.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
