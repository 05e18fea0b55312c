from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ProjectStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class ProjectPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Role(str, Enum):
    HR = "hr"
    EMPLOYEE = "employee"


class ProjectRecord(BaseModel):
    """
    Domain model for one row of the projects sheet.

    (email, project_title) is the identity. `status` and `priority` hold the
    raw sheet strings: unknown values read from the sheet are carried through
    as-is, only the write path rejects them.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str = ""
    name: str = ""
    project_title: str = ""
    project_description: str = ""
    status: str = ProjectStatus.NOT_STARTED.value
    deadline: str = ""
    last_updated: str = ""
    priority: str = ProjectPriority.MEDIUM.value
    department: str = ""
    estimated_hours: Optional[Union[int, float]] = None
    actual_hours: Optional[Union[int, float]] = None
    notes: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.email, self.project_title)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)


class SessionUser(BaseModel):
    """
    Identity produced once at sign-in and stored in the session cookie.
    """
    email: str
    name: str = ""
    picture: Optional[str] = None
    role: Role = Role.EMPLOYEE

    @property
    def is_hr(self) -> bool:
        return self.role == Role.HR
