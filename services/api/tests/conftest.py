"""
Shared fixtures: an in-memory spreadsheet standing in for Google Sheets/Drive.
"""
import os
import re
import sys
from datetime import date

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.project_store import ProjectStore
from models.converters import HEADER_LABELS

_ROW_IN_RANGE = re.compile(r"!A(\d+):Z\d+$")

TODAY = date(2024, 6, 15)


class FakeSheetsClient:
    """
    Implements the SpreadsheetClient protocol over a list of rows.
    `rows[0]` is the header, so sheet row N is `rows[N - 1]`.
    """

    def __init__(self, data_rows=None, title="Projects"):
        self.title = title
        self.sheet_id = 7
        self.rows = [list(HEADER_LABELS)] + [list(r) for r in (data_rows or [])]
        self.calls = []
        self.fail_reads = False
        self.fail_writes = False
        self.fail_exports = False
        self.exports = {}

    # --- protocol ---

    def get_metadata(self):
        self.calls.append(("get_metadata",))
        if self.fail_reads:
            raise RuntimeError("APIError: [403] The caller does not have permission")
        return {
            "title": "Employee Projects",
            "sheets": [{"title": self.title, "sheet_id": self.sheet_id}],
        }

    def get_values(self, a1_range):
        self.calls.append(("get_values", a1_range))
        if self.fail_reads:
            raise RuntimeError("APIError: [403] The caller does not have permission")
        if a1_range.endswith("A1:Z10"):
            return [list(r) for r in self.rows[:10]]
        return [list(r) for r in self.rows[1:]]

    def update_range(self, a1_range, values):
        self.calls.append(("update_range", a1_range))
        if self.fail_writes:
            raise RuntimeError("APIError: [500] backend error")
        row_number = int(_ROW_IN_RANGE.search(a1_range).group(1))
        self.rows[row_number - 1] = list(values[0])

    def append_row(self, a1_range, row):
        self.calls.append(("append_row", a1_range))
        if self.fail_writes:
            raise RuntimeError("APIError: [500] backend error")
        self.rows.append(list(row))

    def delete_row(self, sheet_id, row_number):
        self.calls.append(("delete_row", sheet_id, row_number))
        if self.fail_writes:
            raise RuntimeError("APIError: [500] backend error")
        del self.rows[row_number - 1]

    def export_as(self, mime_type):
        self.calls.append(("export_as", mime_type))
        if self.fail_exports:
            raise RuntimeError("File too large to be exported")
        return self.exports.get(mime_type, b"exported:" + mime_type.encode())

    def get_file_info(self):
        self.calls.append(("get_file_info",))
        return {
            "id": "sheet-123",
            "name": "Employee Projects",
            "mimeType": "application/vnd.google-apps.spreadsheet",
            "createdTime": "2024-01-01T00:00:00Z",
            "modifiedTime": "2024-06-01T00:00:00Z",
        }

    # --- helpers for assertions ---

    @property
    def data_rows(self):
        return self.rows[1:]

    @property
    def write_calls(self):
        return [c for c in self.calls if c[0] in ("update_range", "append_row", "delete_row")]

    @property
    def remote_calls(self):
        return list(self.calls)


def project_row(email, title, **overrides):
    """A 12-cell sheet row with sensible defaults."""
    row = {
        "name": email.split("@")[0].title(),
        "description": f"{title} description",
        "status": "In Progress",
        "deadline": "2024-12-31",
        "last_updated": "2024-06-01",
        "priority": "Medium",
        "department": "Engineering",
        "estimated": "40",
        "actual": "10",
        "notes": "",
    }
    row.update(overrides)
    return [
        email,
        row["name"],
        title,
        row["description"],
        row["status"],
        row["deadline"],
        row["last_updated"],
        row["priority"],
        row["department"],
        row["estimated"],
        row["actual"],
        row["notes"],
    ]


@pytest.fixture
def sheet():
    return FakeSheetsClient(
        [
            project_row("alice@hines.com", "Apollo"),
            project_row("bob@hines.com", "Borealis", status="Completed"),
            project_row("alice@hines.com", "Cassini", status="Not Started", priority="High"),
        ]
    )


@pytest.fixture
def store(sheet):
    return ProjectStore(sheet, today=lambda: TODAY)
