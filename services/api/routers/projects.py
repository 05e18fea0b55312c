# services/api/routers/projects.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from core.access_policy import Operation, apply_write_override, require
from core.auth import get_current_user, require_operation
from core.project_stats import compute_project_stats
from core.project_store import ProjectStore
from core.report_export import export_projects
from core.validation import normalize_export_format, validate_project
from main import get_storage_adapter, get_settings  # DI helpers
from models import SessionUser
from schemas.project import ProjectIn
from settings import Settings

router = APIRouter(prefix="/api/projects", tags=["projects"])
logger = logging.getLogger(__name__)


AppSettings = Annotated[Settings, Depends(get_settings)]


def get_storage(settings: AppSettings) -> ProjectStore:
    """
    Consistent DI wrapper so all routers share the same project store.
    """
    return get_storage_adapter(settings)


def export_format(format: str = Query("csv", description="csv | excel | pdf")) -> str:
    return normalize_export_format(format)


Storage = Annotated[ProjectStore, Depends(get_storage)]
CurrentUser = Annotated[SessionUser, Depends(get_current_user)]


def attachment_response(data: bytes, content_type: str, filename: str) -> Response:
    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
def list_projects(user: CurrentUser, storage: Storage):
    """hr sees every project, employees only their own."""
    if user.is_hr:
        projects = storage.list_all()
    else:
        projects = storage.list_by_owner(user.email)

    return {
        "success": True,
        "projects": [p.to_api() for p in projects],
        "userRole": user.role.value,
        "totalCount": len(projects),
    }


@router.post("/add")
def add_project(body: ProjectIn, user: CurrentUser, storage: Storage):
    """Create or update the caller's (or, for hr, anyone's) project."""
    record = body.to_record()
    validate_project(record)
    record = apply_write_override(user, record)
    require(user, Operation.WRITE, record.email)

    saved = storage.upsert(record)
    return {
        "success": True,
        "message": "Project saved successfully",
        "projectTitle": saved.project_title,
    }


@router.delete("")
def delete_project(
    user: Annotated[SessionUser, Depends(require_operation(Operation.DELETE))],
    storage: Storage,
    email: str = Query(..., min_length=1),
    project_title: str = Query(..., alias="projectTitle", min_length=1),
):
    storage.delete_by_key(email, project_title)
    logger.info(f"{user.email} deleted project '{project_title}' of {email}")
    return {"success": True, "message": "Project deleted successfully"}


@router.get("/export")
def export(
    user: Annotated[SessionUser, Depends(require_operation(Operation.EXPORT))],
    fmt: Annotated[str, Depends(export_format)],
    storage: Storage,
):
    """Render every project as a CSV / Excel / PDF download."""
    data, content_type, filename = export_projects(storage.list_all(), fmt)
    return attachment_response(data, content_type, filename)


@router.get("/stats")
def stats(
    user: Annotated[SessionUser, Depends(require_operation(Operation.STATS))],
    storage: Storage,
):
    return {
        "success": True,
        "stats": compute_project_stats(storage.list_all()),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/user-sheet")
def user_sheet(user: CurrentUser, settings: AppSettings):
    """Links for the embedded sheet view on the dashboard."""
    return {
        "success": True,
        "embedUrl": settings.sheet_embed_url(),
        "viewUrl": settings.sheet_view_url(),
        "userRole": user.role.value,
    }
