"""Tests for standalone schema migrations."""

import importlib.util
import sqlite3
from pathlib import Path

import pytest

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"


def _load(name):
    spec = importlib.util.spec_from_file_location(name, MIGRATIONS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def auth_code_migration():
    return _load("migrate_add_deposit_auth_code")


def _deposit_columns(db_path):
    with sqlite3.connect(db_path) as conn:
        return [row[1] for row in conn.execute("PRAGMA table_info(deposits)")]


def test_adds_auth_code_to_old_table(auth_code_migration, tmp_path):
    """Test the column is added to a deposits table that lacks it."""
    db_path = tmp_path / "old.db"
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "CREATE TABLE deposits (id VARCHAR PRIMARY KEY, cleaner_name VARCHAR NOT NULL, "
            "site VARCHAR NOT NULL, date VARCHAR NOT NULL, cash_amount NUMERIC(12, 2) NOT NULL, "
            "card_amount NUMERIC(12, 2) NOT NULL, total_amount NUMERIC(12, 2) NOT NULL, "
            "deposit_slip VARCHAR)"
        )

    assert auth_code_migration.migrate_database(str(db_path)) is True
    assert "auth_code" in _deposit_columns(db_path)


def test_already_applied(auth_code_migration, temp_db):
    """Test a current database is left alone."""
    assert auth_code_migration.migrate_database(temp_db.database_path) is False
    assert _deposit_columns(temp_db.database_path).count("auth_code") == 1


def test_missing_deposits_table(auth_code_migration, tmp_path):
    """Test a database without a deposits table is reported and left untouched."""
    db_path = tmp_path / "empty.db"
    sqlite3.connect(db_path).close()

    with pytest.raises(RuntimeError, match="Table 'deposits' does not exist"):
        auth_code_migration.migrate_database(str(db_path))

    with sqlite3.connect(db_path) as conn:
        tables = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    assert tables == []
