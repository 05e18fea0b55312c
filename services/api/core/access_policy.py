"""
Role-based access decisions.

hr may do everything. An employee may read and write only their own
projects and may never delete or export. All checks are pure; the routers
call them before touching the sheet.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from core.errors import AccessDenied, ValidationError
from models import ProjectRecord, Role, SessionUser


class Operation(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    EXPORT = "export"
    # hr-only capabilities that have no target record
    STATS = "stats"
    EMAIL = "email"
    DIAGNOSTICS = "diagnostics"


_OWNER_OPERATIONS = {Operation.READ, Operation.WRITE}

_DENIED_MESSAGES = {
    Operation.READ: "You can only view your own projects",
    Operation.WRITE: "You can only update your own projects",
    Operation.DELETE: "Access denied. Only HR can delete projects.",
    Operation.EXPORT: "Access denied. Only HR can export project data.",
    Operation.STATS: "Access denied. Only HR can view project statistics.",
    Operation.EMAIL: "Access denied. Only HR can send or check report emails.",
    Operation.DIAGNOSTICS: "Access denied. Only HR can test the sheet connection.",
}


def resolve_role(email: str, hr_emails: List[str]) -> Role:
    """hr iff the address is in the configured HR list (exact match)."""
    return Role.HR if email and email in hr_emails else Role.EMPLOYEE


def is_allowed(user: SessionUser, operation: Operation, target_email: Optional[str] = None) -> bool:
    if user.role == Role.HR:
        return True
    if operation in _OWNER_OPERATIONS:
        return target_email is not None and target_email == user.email
    return False


def require(user: SessionUser, operation: Operation, target_email: Optional[str] = None) -> None:
    """Raise AccessDenied unless `is_allowed`."""
    if not is_allowed(user, operation, target_email):
        raise AccessDenied(_DENIED_MESSAGES[operation])


def apply_write_override(user: SessionUser, record: ProjectRecord) -> ProjectRecord:
    """
    Bind a submitted project to the acting user.

    Employees always write as themselves: email and name are replaced by the
    authenticated identity instead of rejecting a foreign email. hr writes
    pass through but must name the owner.
    """
    if user.role != Role.HR:
        return record.model_copy(update={"email": user.email, "name": user.name or ""})

    if not (record.email or "").strip():
        raise ValidationError("Email is required when saving a project for another user")
    return record
