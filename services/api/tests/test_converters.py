"""
Tests for the positional sheet-row mapping.

Run with: pytest tests/test_converters.py -v
"""
import sys
import os
from datetime import date

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import ProjectRecord
from models.converters import record_to_row, row_to_record, rows_to_records

FULL_ROW = [
    "alice@hines.com", "Alice", "Apollo", "Moon", "In Progress", "2024-12-31",
    "2024-06-01", "High", "Engineering", "40", "12", "note",
]


class TestRowToRecord:
    """Tests for reading a sheet row."""

    @pytest.mark.parametrize("length", range(0, 13))
    def test_total_over_short_rows(self, length):
        """Any prefix of a row maps without raising."""
        record = row_to_record(FULL_ROW[:length])
        assert isinstance(record, ProjectRecord)

    def test_empty_row_defaults(self):
        record = row_to_record([])
        assert record.email == ""
        assert record.status == "Not Started"
        assert record.priority == "Medium"
        assert record.estimated_hours is None
        assert record.actual_hours is None

    def test_full_row(self):
        record = row_to_record(FULL_ROW)
        assert record.email == "alice@hines.com"
        assert record.project_title == "Apollo"
        assert record.priority == "High"
        assert record.estimated_hours == 40
        assert record.actual_hours == 12
        assert record.notes == "note"

    def test_hours_keep_leading_integer(self):
        row = list(FULL_ROW)
        row[9] = "12.5"
        row[10] = "abc"
        record = row_to_record(row)
        assert record.estimated_hours == 12
        assert record.actual_hours is None

    def test_unknown_status_is_carried_through(self):
        row = list(FULL_ROW)
        row[4] = "Blocked"
        assert row_to_record(row).status == "Blocked"


class TestRecordToRow:
    """Tests for writing a sheet row."""

    def test_always_twelve_cells(self):
        assert len(record_to_row(ProjectRecord(email="a@hines.com", project_title="T"))) == 12

    def test_last_updated_is_write_date(self):
        record = ProjectRecord(email="a@hines.com", project_title="T", last_updated="1999-01-01")
        row = record_to_row(record, today=date(2024, 6, 15))
        assert row[6] == "2024-06-15"

    def test_integral_float_hours_render_as_int(self):
        record = ProjectRecord(email="a@hines.com", project_title="T", estimated_hours=10.0)
        assert record_to_row(record)[9] == "10"
        assert record_to_row(record)[10] == ""

    def test_round_trip_is_stable_except_last_updated(self):
        row = record_to_row(row_to_record(FULL_ROW), today=date(2024, 6, 15))
        expected = list(FULL_ROW)
        expected[6] = "2024-06-15"
        assert row == expected


class TestRowsToRecords:
    """Tests for reading the whole data range."""

    def test_skips_rows_without_email_but_keeps_row_numbers(self):
        rows = [
            FULL_ROW,
            [],
            ["", "Nobody", "Orphan"],
            ["bob@hines.com", "Bob", "Borealis"],
        ]
        indexed = rows_to_records(rows)
        assert [n for n, _ in indexed] == [2, 5]
        assert [r.email for _, r in indexed] == ["alice@hines.com", "bob@hines.com"]
