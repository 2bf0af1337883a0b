"""Store factory functions for creating store instances."""

import os
from pathlib import Path
from typing import Optional

from cashpilot.database.sqlalchemy_db import SQLAlchemyStore

DB_PATH_ENV = "CASHPILOT_DB_PATH"


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed store.

    Args:
        database_path: Path to SQLite database file. If None, checks CASHPILOT_DB_PATH
            environment variable, then defaults to ~/.cashpilot/cashpilot.db

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        db_dir = Path.home() / ".cashpilot"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "cashpilot.db")

    return SQLAlchemyStore(f"sqlite:///{database_path}")
