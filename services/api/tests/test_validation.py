"""
Tests for validation functions.

Run with: pytest tests/test_validation.py -v
"""
import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

from core.errors import ValidationError
from core.validation import normalize_export_format, parse_iso_date, validate_project
from models import ProjectRecord


def _record(**kwargs):
    base = {"email": "alice@hines.com", "project_title": "Apollo"}
    base.update(kwargs)
    return ProjectRecord(**base)


class TestValidateProject:
    """Tests for write-time project validation."""

    def test_valid_project(self):
        """A complete, well-formed project should not raise."""
        validate_project(_record(status="Completed", priority="High", deadline="2024-12-31",
                                 estimated_hours=10, actual_hours=0))

    def test_blank_title(self):
        with pytest.raises(ValidationError, match="Project title is required"):
            validate_project(_record(project_title="   "))

    def test_invalid_status(self):
        with pytest.raises(ValidationError, match="Invalid status"):
            validate_project(_record(status="Blocked"))

    def test_invalid_priority(self):
        with pytest.raises(ValidationError, match="Invalid priority"):
            validate_project(_record(priority="Urgent"))

    def test_invalid_deadline(self):
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            validate_project(_record(deadline="31/12/2024"))

    def test_negative_hours(self):
        with pytest.raises(ValidationError, match="Estimated hours"):
            validate_project(_record(estimated_hours=-1))
        with pytest.raises(ValidationError, match="Actual hours"):
            validate_project(_record(actual_hours=-0.5))

    def test_error_is_http_400(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_project(_record(project_title=""))
        assert exc_info.value.status_code == 400


class TestParseIsoDate:
    """Tests for deadline parsing."""

    def test_plain_date(self):
        assert parse_iso_date("2024-03-01") == date(2024, 3, 1)

    def test_datetime_with_z(self):
        assert parse_iso_date("2024-03-01T10:00:00Z") == date(2024, 3, 1)

    def test_blank_and_garbage(self):
        assert parse_iso_date("") is None
        assert parse_iso_date(None) is None
        assert parse_iso_date("next week") is None


class TestNormalizeExportFormat:
    """Tests for export format checks."""

    def test_case_insensitive(self):
        assert normalize_export_format(" PDF ") == "pdf"
        assert normalize_export_format("Excel") == "excel"

    def test_unknown_format(self):
        with pytest.raises(ValidationError, match="Supported formats: csv, excel, pdf"):
            normalize_export_format("docx")
