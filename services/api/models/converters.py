from __future__ import annotations

import re
from datetime import date
from typing import Any, List, Optional, Sequence, Tuple

from . import ProjectPriority, ProjectRecord, ProjectStatus

# Fixed positional layout of the projects sheet (row 1 is a human header).
COLUMNS = [
    "email",
    "name",
    "project_title",
    "project_description",
    "status",
    "deadline",
    "last_updated",
    "priority",
    "department",
    "estimated_hours",
    "actual_hours",
    "notes",
]

HEADER_LABELS = [
    "Email",
    "Name",
    "Project Title",
    "Project Description",
    "Status",
    "Deadline",
    "Last Updated",
    "Priority",
    "Department",
    "Estimated Hours",
    "Actual Hours",
    "Notes",
]

# Data starts on sheet row 2
FIRST_DATA_ROW = 2

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _cell(cells: Sequence[Any], idx: int) -> str:
    if idx >= len(cells) or cells[idx] is None:
        return ""
    return str(cells[idx])


def _safe_int(v: str) -> Optional[int]:
    """
    Integer parse of a sheet cell: "12" -> 12, "12.5" -> 12, "abc" -> None.
    """
    m = _LEADING_INT.match(v or "")
    if not m:
        return None
    return int(m.group(1))


def _render_number(v: Any) -> str:
    if v is None or v == "":
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def row_to_record(cells: Sequence[Any]) -> ProjectRecord:
    """
    Map one sheet row (0-12 cells, trailing cells may be missing) to a
    ProjectRecord. Never raises: blank or absent cells become defaults.
    """
    return ProjectRecord(
        email=_cell(cells, 0),
        name=_cell(cells, 1),
        project_title=_cell(cells, 2),
        project_description=_cell(cells, 3),
        status=_cell(cells, 4) or ProjectStatus.NOT_STARTED.value,
        deadline=_cell(cells, 5),
        last_updated=_cell(cells, 6),
        priority=_cell(cells, 7) or ProjectPriority.MEDIUM.value,
        department=_cell(cells, 8),
        estimated_hours=_safe_int(_cell(cells, 9)),
        actual_hours=_safe_int(_cell(cells, 10)),
        notes=_cell(cells, 11),
    )


def record_to_row(record: ProjectRecord, today: Optional[date] = None) -> List[str]:
    """
    Render a record as exactly 12 cells. `last_updated` is always the write
    date, whatever the caller put in the record.
    """
    today = today or date.today()
    return [
        record.email or "",
        record.name or "",
        record.project_title or "",
        record.project_description or "",
        record.status or ProjectStatus.NOT_STARTED.value,
        record.deadline or "",
        today.isoformat(),
        record.priority or ProjectPriority.MEDIUM.value,
        record.department or "",
        _render_number(record.estimated_hours),
        _render_number(record.actual_hours),
        record.notes or "",
    ]


def rows_to_records(rows: Sequence[Sequence[Any]]) -> List[Tuple[int, ProjectRecord]]:
    """
    Drop rows whose email cell is empty and map the rest.

    Returns (sheet_row_number, record) pairs so writes can address the
    row the record was actually read from.
    """
    out: List[Tuple[int, ProjectRecord]] = []
    for offset, row in enumerate(rows):
        if not row or not _cell(row, 0):
            continue
        out.append((FIRST_DATA_ROW + offset, row_to_record(row)))
    return out
