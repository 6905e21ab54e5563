"""Tests for collection CSV export."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from cashtrack.domain.csv_export import (
    CollectionExportService,
    export_filename,
    format_row,
    quote,
)
from cashtrack.domain.entities import CollectionRecord
from cashtrack.domain.errors import ValidationError


@pytest.fixture
def export_service(temp_db):
    """Create a CollectionExportService with a temporary database."""
    return CollectionExportService(temp_db)


def test_quote_doubles_inner_quotes():
    """Test text fields are quoted."""
    assert quote('Tower "A"') == '"Tower ""A"""'
    assert quote(None) == '""'


def test_export_filename():
    """Test the file name carries the range."""
    assert (
        export_filename(date(2024, 1, 1), date(2024, 1, 10))
        == "collections-export-2024-01-01-to-2024-01-10.csv"
    )


def test_format_row():
    """Test one row's layout."""
    record = CollectionRecord(
        id="x",
        cleaner_name="Ali",
        site="Tower A",
        date=datetime(2024, 1, 5, 23, 30, tzinfo=UTC),
        amount=Decimal("250"),
        notes='said "thanks"',
    )
    assert format_row(record) == '2024-01-05,"Ali","Tower A",250.00,"said ""thanks"""'


def test_export_only_includes_range(export_service, sample_collections):
    """Test only collections inside the range are exported."""
    filename, text = export_service.export_collections(date(2024, 1, 1), date(2024, 1, 10))

    lines = text.splitlines()
    assert filename == "collections-export-2024-01-01-to-2024-01-10.csv"
    assert lines[0] == "Date,Cleaner Name,Site,Amount,Notes"
    assert lines[1:] == [
        '2024-01-05,"Ali","Tower A",250.00,""',
        '2024-01-08,"Ali","Tower B",100.00,"Evening shift"',
    ]


def test_export_single_record_range(export_service, sample_collections):
    """Test the range example from the dashboard: only the 5th is included."""
    export_service_text = export_service.export_collections(date(2024, 1, 1), date(2024, 1, 6))[1]
    assert "2024-01-05" in export_service_text
    assert "2024-01-20" not in export_service_text
    assert "2024-01-08" not in export_service_text


def test_export_end_day_inclusive(export_service, sample_collections):
    """Test a record late on the end day is included."""
    _, text = export_service.export_collections(date(2024, 1, 20), date(2024, 1, 20))
    assert '"Sara"' in text


def test_export_empty_range(export_service, sample_collections):
    """Test an empty range still has a header."""
    _, text = export_service.export_collections(date(2023, 1, 1), date(2023, 1, 31))
    assert text == "Date,Cleaner Name,Site,Amount,Notes\n"


def test_export_rejects_reversed_range(export_service, sample_collections):
    """Test start after end is rejected."""
    with pytest.raises(ValidationError):
        export_service.export_collections(date(2024, 1, 10), date(2024, 1, 1))


def test_export_requires_both_dates(export_service):
    """Test missing dates are rejected."""
    with pytest.raises(ValidationError):
        export_service.export_collections(None, date(2024, 1, 1))
