"""
Request bodies for the project, email and cron routes.
Field names are camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models import ProjectPriority, ProjectRecord, ProjectStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectIn(_CamelModel):
    """Body of POST /api/projects/add. Business rules live in core.validation."""
    email: Optional[str] = Field(None, description="Owner email (ignored for employees)")
    name: Optional[str] = None
    project_title: str = Field("", description="Unique per owner")
    project_description: Optional[str] = None
    status: Optional[str] = Field(None, description="Not Started | In Progress | Completed | On Hold")
    deadline: Optional[str] = Field(None, description="YYYY-MM-DD")
    priority: Optional[str] = Field(None, description="Low | Medium | High")
    department: Optional[str] = None
    estimated_hours: Optional[float] = Field(None, description="Planned hours")
    actual_hours: Optional[float] = Field(None, description="Hours spent so far")
    notes: Optional[str] = None

    def to_record(self) -> ProjectRecord:
        return ProjectRecord(
            email=(self.email or "").strip(),
            name=self.name or "",
            project_title=self.project_title.strip(),
            project_description=self.project_description or "",
            status=self.status or ProjectStatus.NOT_STARTED.value,
            deadline=self.deadline or "",
            priority=self.priority or ProjectPriority.MEDIUM.value,
            department=self.department or "",
            estimated_hours=self.estimated_hours,
            actual_hours=self.actual_hours,
            notes=self.notes or "",
        )


class EmailTestIn(_CamelModel):
    """Body of POST /api/email/test."""
    message: str = Field(..., min_length=1, description="Notification text")
    include_attachment: bool = False


class CronReportIn(_CamelModel):
    """Optional body of POST /api/cron/send-reports."""
    custom_message: Optional[str] = None
