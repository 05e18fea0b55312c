# services/api/core/project_stats.py
from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, Optional

from core.validation import parse_iso_date
from models import ProjectRecord, ProjectStatus


def _is_overdue(p: ProjectRecord, today: date) -> bool:
    if p.status == ProjectStatus.COMPLETED.value:
        return False
    deadline = parse_iso_date(p.deadline)
    return deadline is not None and deadline < today


def compute_project_stats(
    projects: Iterable[ProjectRecord], today: Optional[date] = None
) -> Dict[str, Any]:
    """
    Dashboard aggregates over all projects.

    overdueProjects: deadline before today and not Completed.
    completionRate: completed / total * 100 (0 when there are no projects).
    """
    today = today or date.today()
    projects = list(projects)

    by_status = Counter(p.status for p in projects)
    total = len(projects)
    completed = by_status.get(ProjectStatus.COMPLETED.value, 0)

    return {
        "totalProjects": total,
        "completedProjects": completed,
        "inProgressProjects": by_status.get(ProjectStatus.IN_PROGRESS.value, 0),
        "notStartedProjects": by_status.get(ProjectStatus.NOT_STARTED.value, 0),
        "onHoldProjects": by_status.get(ProjectStatus.ON_HOLD.value, 0),
        "overdueProjects": sum(1 for p in projects if _is_overdue(p, today)),
        "statusStats": dict(by_status),
        "departmentStats": dict(Counter(p.department or "Unassigned" for p in projects)),
        "priorityStats": dict(Counter(p.priority for p in projects)),
        "completionRate": (completed / total) * 100 if total > 0 else 0,
    }
