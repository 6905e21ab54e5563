"""Shared pytest fixtures for cashtrack tests."""

import base64
import tempfile
import os
from datetime import UTC, datetime
from decimal import Decimal
import pytest

from cashtrack.database.factories import create_sqlite_database
from cashtrack.database.slip_store import FileSlipStore
from cashtrack.domain.balance import BalanceService
from cashtrack.domain.collection import CollectionService
from cashtrack.domain.deposit import DepositService
from cashtrack.domain.pending import PendingService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def reopen(temp_db):
    """Open a second handle on the temporary database.

    CLI commands write through their own connection; reading back through a
    fresh handle avoids stale objects cached in the fixture's session.
    """
    handles = []

    def _reopen():
        db = create_sqlite_database(database_path=temp_db.database_path)
        db.connect()
        handles.append(db)
        return db

    yield _reopen

    for db in handles:
        db.disconnect()


@pytest.fixture
def slip_store(tmp_path):
    """Create a slip store rooted in a temporary directory."""
    return FileSlipStore(tmp_path / "slips")


@pytest.fixture
def collection_service(temp_db):
    """Create a CollectionService with a temporary database."""
    return CollectionService(temp_db)


@pytest.fixture
def pending_service(temp_db):
    """Create a PendingService with a temporary database."""
    return PendingService(temp_db)


@pytest.fixture
def deposit_service(temp_db, slip_store):
    """Create a DepositService with a temporary database and slip store."""
    return DepositService(temp_db, slip_store)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def now():
    """A fixed 'current' instant for day counts."""
    return datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def slip_data_uri():
    """A small PNG-typed data URI."""
    payload = base64.b64encode(b"\x89PNG fake slip bytes").decode("ascii")
    return f"data:image/png;base64,{payload}"


@pytest.fixture
def sample_collections(collection_service):
    """Two collections for Ali and one for Sara."""
    return [
        collection_service.create_collection(
            cleaner_name="Ali",
            site="Tower A",
            amount=Decimal("250.00"),
            date=datetime(2024, 1, 5, 9, 0, tzinfo=UTC),
        ),
        collection_service.create_collection(
            cleaner_name="Ali",
            site="Tower B",
            amount=Decimal("100.00"),
            date=datetime(2024, 1, 8, 9, 0, tzinfo=UTC),
            notes="Evening shift",
        ),
        collection_service.create_collection(
            cleaner_name="Sara",
            site="Marina",
            amount=Decimal("75.50"),
            date=datetime(2024, 1, 20, 9, 0, tzinfo=UTC),
        ),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
