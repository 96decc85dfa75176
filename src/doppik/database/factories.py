"""Factories for the ledger store."""

import os
from pathlib import Path
from typing import Optional

from doppik.database.sqlalchemy_db import SQLAlchemyDatabase
from doppik.logging_setup import get_logger

logger = get_logger("doppik.database")

DB_PATH_ENV = "DOPPIK_DB_PATH"
DEFAULT_DB_DIR = Path.home() / ".doppik"


def default_database_path() -> Path:
    """Location of the ledger when neither an argument nor DOPPIK_DB_PATH is given."""
    return DEFAULT_DB_DIR / "doppik.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open the SQLite ledger.

    Args:
        database_path: Path to the SQLite file. Falls back to DOPPIK_DB_PATH,
            then to ~/.doppik/doppik.db (the directory is created if needed).

    Returns:
        SQLAlchemyDatabase bound to the file
    """
    path = database_path or os.environ.get(DB_PATH_ENV)
    if path is None:
        default = default_database_path()
        default.parent.mkdir(parents=True, exist_ok=True)
        path = str(default)

    logger.debug("Opening SQLite ledger at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
