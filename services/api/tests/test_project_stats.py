"""
Tests for dashboard statistics.

Run with: pytest tests/test_project_stats.py -v
"""
import sys
import os
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.project_stats import compute_project_stats
from models import ProjectRecord


def _p(status, **kwargs):
    return ProjectRecord(email="a@hines.com", project_title=f"{status}-{len(kwargs)}", status=status, **kwargs)


class TestComputeProjectStats:
    def test_completion_rate(self):
        stats = compute_project_stats(
            [_p("Completed"), _p("Completed"), _p("In Progress"), _p("Not Started")],
            today=date(2024, 6, 15),
        )
        assert stats["totalProjects"] == 4
        assert stats["completedProjects"] == 2
        assert stats["inProgressProjects"] == 1
        assert stats["notStartedProjects"] == 1
        assert stats["onHoldProjects"] == 0
        assert stats["completionRate"] == 50.0
        assert stats["statusStats"] == {"Completed": 2, "In Progress": 1, "Not Started": 1}

    def test_empty(self):
        stats = compute_project_stats([])
        assert stats["totalProjects"] == 0
        assert stats["completionRate"] == 0
        assert stats["departmentStats"] == {}

    def test_overdue_ignores_completed_and_blank_deadlines(self):
        today = date(2024, 6, 15)
        projects = [
            _p("In Progress", deadline="2024-06-14"),
            _p("Completed", deadline="2024-01-01"),
            _p("On Hold", deadline="2024-06-15"),
            _p("Not Started", deadline=""),
            _p("In Progress", deadline="soon"),
        ]
        assert compute_project_stats(projects, today=today)["overdueProjects"] == 1

    def test_department_and_priority_buckets(self):
        projects = [
            _p("Completed", department="Engineering", priority="High"),
            _p("Completed", department="", priority="High"),
            _p("In Progress", department="Engineering"),
        ]
        stats = compute_project_stats(projects)
        assert stats["departmentStats"] == {"Engineering": 2, "Unassigned": 1}
        assert stats["priorityStats"] == {"High": 2, "Medium": 1}
