"""
Tests for Drive export and diagnostics.

Run with: pytest tests/test_drive_client.py -v
"""
import sys
import os
from datetime import date

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import FakeSheetsClient
from core.drive_client import check_drive_connection, download_sheet_file, export_filename
from core.errors import UpstreamFailure, ValidationError


class TestDownloadSheetFile:
    def test_excel_export(self):
        client = FakeSheetsClient()
        data, mime, filename = download_sheet_file(client, "excel")
        assert mime == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        assert data == b"exported:" + mime.encode()
        assert filename.endswith(".xlsx")

    def test_bad_format_makes_no_remote_call(self):
        client = FakeSheetsClient()
        with pytest.raises(ValidationError):
            download_sheet_file(client, "docx")
        assert client.remote_calls == []

    def test_export_failure_has_friendly_details(self):
        client = FakeSheetsClient()
        client.fail_exports = True
        with pytest.raises(UpstreamFailure) as exc_info:
            download_sheet_file(client, "pdf")
        assert exc_info.value.message == "Failed to download sheet data"
        assert "too large" in exc_info.value.details


class TestExportFilename:
    def test_dated_names(self):
        d = date(2024, 6, 15)
        assert export_filename("csv", d) == "employee-projects-2024-06-15.csv"
        assert export_filename("excel", d) == "employee-projects-2024-06-15.xlsx"
        assert export_filename("pdf", d) == "employee-projects-2024-06-15.pdf"


class TestCheckDriveConnection:
    def test_success(self):
        result = check_drive_connection(FakeSheetsClient())
        assert result["success"] is True
        assert result["fileMetadata"]["id"] == "sheet-123"
        assert result["supportedFormats"] == ["csv", "excel", "pdf"]

    def test_failure_never_raises(self):
        client = FakeSheetsClient()
        client.fail_exports = True
        result = check_drive_connection(client)
        assert result["success"] is False
        assert "help" in result
