"""Record store layer for cashtrack application."""

from cashtrack.database.base import Database
from cashtrack.database.factories import create_slip_store, create_sqlite_database
from cashtrack.database.live_query import LiveQuery
from cashtrack.database.slip_store import FileSlipStore

__all__ = ["Database", "LiveQuery", "FileSlipStore", "create_sqlite_database", "create_slip_store"]
