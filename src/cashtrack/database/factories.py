"""Factory functions for creating the record store and slip store."""

import os
from pathlib import Path
from typing import Optional

from cashtrack.database.slip_store import FileSlipStore
from cashtrack.database.sqlalchemy_db import SQLAlchemyDatabase


def _default_data_dir() -> Path:
    data_dir = Path.home() / ".cashtrack"
    data_dir.mkdir(exist_ok=True)
    return data_dir


def sqlite_database_url(database_path: Optional[str] = None) -> str:
    """Return the SQLite URL for ``database_path``.

    If None, checks CASHTRACK_DB_PATH environment variable, then defaults to
    ~/.cashtrack/cashtrack.db
    """
    if database_path is None:
        database_path = os.environ.get("CASHTRACK_DB_PATH")

    if database_path is None:
        database_path = str(_default_data_dir() / "cashtrack.db")

    return f"sqlite:///{database_path}"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file (see ``sqlite_database_url``)

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    return SQLAlchemyDatabase(sqlite_database_url(database_path))


def create_slip_store(slip_dir: Optional[str] = None) -> FileSlipStore:
    """Create the deposit slip store.

    Args:
        slip_dir: Root directory for stored slips. If None, checks CASHTRACK_SLIP_DIR
            environment variable, then defaults to ~/.cashtrack

    Returns:
        FileSlipStore rooted at the chosen directory
    """
    if slip_dir is None:
        slip_dir = os.environ.get("CASHTRACK_SLIP_DIR")

    if slip_dir is None:
        return FileSlipStore(_default_data_dir())
    return FileSlipStore(Path(slip_dir))
