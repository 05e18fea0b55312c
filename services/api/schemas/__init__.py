"""
Pydantic schemas for API request validation.
"""
from .project import CronReportIn, EmailTestIn, ProjectIn

__all__ = [
    "ProjectIn",
    "EmailTestIn",
    "CronReportIn",
]
