#!/usr/bin/env python3
"""Migration script to add the card authorization code to the deposits table.

Databases created before deposits carried an auth code lack the column:
- auth_code (TEXT, nullable)

Usage:
    python migrations/migrate_add_deposit_auth_code.py [--db-path PATH]
"""

import logging
import sys

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine

from cashtrack.database.factories import sqlite_database_url

logger = logging.getLogger("cashtrack.migrations.deposit_auth_code")

TABLE = "deposits"
COLUMN = "auth_code"


def column_exists(engine: Engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    return column_name in [col["name"] for col in inspect(engine).get_columns(table_name)]


def migrate_database(database_path: str | None = None) -> bool:
    """Add deposits.auth_code if it is missing.

    Args:
        database_path: Path to database file. If None, uses CASHTRACK_DB_PATH
            or the default location.

    Returns:
        True if the column was added, False if it was already there

    Raises:
        RuntimeError: If the deposits table does not exist
    """
    engine = create_engine(sqlite_database_url(database_path))

    try:
        if TABLE not in inspect(engine).get_table_names():
            raise RuntimeError(f"Table '{TABLE}' does not exist. Run any cashtrack command first.")

        if column_exists(engine, TABLE, COLUMN):
            logger.info("Migration already applied: %s.%s exists", TABLE, COLUMN)
            return False

        with engine.begin() as conn:
            conn.execute(text(f"ALTER TABLE {TABLE} ADD COLUMN {COLUMN} TEXT"))
        logger.info("Added column %s.%s", TABLE, COLUMN)
        return True
    finally:
        engine.dispose()


def main():
    """Main entry point for migration script."""
    import argparse

    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    parser = argparse.ArgumentParser(description="Add the auth_code column to deposits")
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides CASHTRACK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception:
        logger.exception("Migration failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
