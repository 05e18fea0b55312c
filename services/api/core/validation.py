"""
Validation utilities for the project tracker.
Everything here runs before any remote call and raises ValidationError
(HTTP 400) with a message the dashboard can show as-is.
"""
from datetime import date, datetime
from typing import Optional

from core.errors import ValidationError
from models import ProjectPriority, ProjectRecord, ProjectStatus

EXPORT_FORMATS = ("csv", "excel", "pdf")

VALID_STATUSES = [s.value for s in ProjectStatus]
VALID_PRIORITIES = [p.value for p in ProjectPriority]


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse "YYYY-MM-DD" or a full ISO-8601 datetime into a date.
    Returns None for blank or unparseable input.
    """
    if not value or not str(value).strip():
        return None
    s = str(value).strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def normalize_export_format(fmt: Optional[str]) -> str:
    """
    Lower-case and check an export format.

    Raises:
        ValidationError: format is not one of csv, excel, pdf
    """
    value = (fmt or "").strip().lower()
    if value not in EXPORT_FORMATS:
        raise ValidationError(
            "Invalid format. Supported formats: " + ", ".join(EXPORT_FORMATS)
        )
    return value


def validate_project(record: ProjectRecord) -> None:
    """
    Validate a project submitted for upsert.

    Rules:
    - project_title must be non-blank
    - status / priority, when given, must be known enum values
    - deadline, when given, must be an ISO date
    - estimated_hours / actual_hours, when given, must be >= 0

    Raises:
        ValidationError: first rule that fails
    """
    if not (record.project_title or "").strip():
        raise ValidationError("Project title is required")

    if record.status and record.status not in VALID_STATUSES:
        raise ValidationError(
            "Invalid status. Must be one of: " + ", ".join(VALID_STATUSES)
        )

    if record.priority and record.priority not in VALID_PRIORITIES:
        raise ValidationError(
            "Invalid priority. Must be one of: " + ", ".join(VALID_PRIORITIES)
        )

    if record.deadline and parse_iso_date(record.deadline) is None:
        raise ValidationError("Invalid deadline format. Please use YYYY-MM-DD")

    if record.estimated_hours is not None and record.estimated_hours < 0:
        raise ValidationError("Estimated hours must be a positive number")

    if record.actual_hours is not None and record.actual_hours < 0:
        raise ValidationError("Actual hours must be a positive number")
