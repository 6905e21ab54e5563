"""Tests for importing pasted pending lists."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from cashtrack.domain.errors import ValidationError
from cashtrack.domain.pending import PendingService
from cashtrack.domain.pending_import import (
    PendingImportService,
    locate_columns,
    parse_pending_text,
    split_line,
)

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def import_service(temp_db):
    """Create a PendingImportService with a temporary database."""
    return PendingImportService(temp_db)


def test_split_line_tabs_and_commas():
    """Test both separators are accepted, even mixed."""
    assert split_line("a\tb,c") == ["a", "b", "c"]


def test_locate_columns_any_order():
    """Test columns are found by substring, case-insensitively."""
    indices = locate_columns("Site Name\tCar PLATE No\tContract Amount Cash (AED)\tCleaner Name")
    assert indices == {"car_plate": 1, "amount": 2, "cleaner_name": 3, "site": 0}


def test_locate_columns_missing():
    """Test a missing column aborts."""
    with pytest.raises(ValidationError, match="Could not find all required columns"):
        locate_columns("Cleaner Name,Site Name,Plate")


def test_parse_single_row():
    """Test one valid row."""
    parsed = parse_pending_text(
        "Cleaner Name,Site Name,Plate,Contract Amount Cash\nAli,Tower A,P12345,AED 250.00",
        now=NOW,
    )

    assert parsed.errors == []
    assert parsed.items == [
        {
            "cleaner_name": "Ali",
            "site": "Tower A",
            "car_plate": "P12345",
            "amount": Decimal("250.00"),
            "date": NOW,
        }
    ]


def test_parse_skips_bad_rows_and_keeps_going():
    """Test invalid amounts are reported without stopping the import."""
    text = "\n".join(
        [
            "Plate\tContract Amount Cash\tCleaner Name\tSite Name",
            "P1\tabc\tAli\tTower A",
            "P2\t0\tAli\tTower A",
            "",
            "P3\t-5\tAli\tTower A",
            "P4\t120\tSara\tMarina",
            "P5\t80",
        ]
    )
    parsed = parse_pending_text(text, now=NOW)

    assert [item["car_plate"] for item in parsed.items] == ["P4"]
    assert len(parsed.errors) == 4
    assert parsed.errors[0].startswith("Row 2:")
    assert parsed.errors[2].startswith("Row 5:")
    assert parsed.errors[3].startswith("Row 7:")


def test_parse_rejects_sub_cent_amount():
    """Test an amount finer than a cent is reported, not rounded to zero."""
    parsed = parse_pending_text(
        "Cleaner Name,Site Name,Plate,Contract Amount Cash\nAli,Tower A,P1,0.004\nAli,Tower A,P2,12.50",
        now=NOW,
    )

    assert [item["car_plate"] for item in parsed.items] == ["P2"]
    assert parsed.items[0]["amount"] == Decimal("12.50")
    assert len(parsed.errors) == 1
    assert parsed.errors[0].startswith("Row 2:")


def test_parse_empty_text():
    """Test empty paste."""
    with pytest.raises(ValidationError, match="Pasted data is empty"):
        parse_pending_text("   \n  ")


def test_parse_windows_line_endings():
    """Test carriage returns are ignored."""
    parsed = parse_pending_text(
        "Cleaner Name,Site Name,Plate,Contract Amount Cash\r\nAli,Tower A,P1,10\r\n", now=NOW
    )
    assert parsed.items[0]["amount"] == Decimal("10")


def test_import_text_stores_items(import_service, temp_db):
    """Test valid rows become pending items in one batch."""
    result = import_service.import_text(
        "Cleaner Name\tSite Name\tPlate\tContract Amount Cash\n"
        "Ali\tTower A\tP1\t250\n"
        "Sara\tMarina\tP2\tbad\n"
        "Omar\tTower B\tP3\tAED 1250.50\n",
        now=NOW,
    )

    assert result["imported"] == 2
    assert len(result["errors"]) == 1
    items = PendingService(temp_db).list_items()
    assert sorted(item.car_plate for item in items) == ["P1", "P3"]
    assert {item.amount for item in items} == {Decimal("250"), Decimal("1250.50")}
    assert all(item.date == NOW for item in items)


def test_import_text_no_valid_rows(import_service, temp_db):
    """Test an import with nothing valid stores nothing."""
    with pytest.raises(ValidationError, match="No valid data found to import"):
        import_service.import_text(
            "Cleaner Name,Site Name,Plate,Contract Amount Cash\nAli,Tower A,P1,zero"
        )
    assert PendingService(temp_db).list_items() == []
