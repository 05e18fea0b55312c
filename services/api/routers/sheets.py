# services/api/routers/sheets.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.access_policy import Operation
from core.auth import require_operation
from core.drive_client import check_drive_connection, download_sheet_file
from main import get_sheets_client, get_storage_adapter  # DI helpers
from models import SessionUser
from routers.projects import AppSettings, attachment_response, export_format

router = APIRouter(prefix="/api/sheets", tags=["sheets"])


def get_client(settings: AppSettings):
    return get_sheets_client(settings)


def get_storage(settings: AppSettings):
    return get_storage_adapter(settings)


Client = Annotated[object, Depends(get_client)]
Storage = Annotated[object, Depends(get_storage)]
Diagnostics = Annotated[SessionUser, Depends(require_operation(Operation.DIAGNOSTICS))]


@router.get("/test")
def test_sheets(user: Diagnostics, storage: Storage):
    """Sheets API connectivity check (200 on success, 500 otherwise)."""
    result = storage.test_connection()
    return JSONResponse(status_code=200 if result["success"] else 500, content=result)


@router.get("/download")
def download(
    user: Annotated[SessionUser, Depends(require_operation(Operation.EXPORT))],
    fmt: Annotated[str, Depends(export_format)],
    client: Client,
):
    """The spreadsheet itself, exported by Drive."""
    data, content_type, filename = download_sheet_file(client, fmt)
    return attachment_response(data, content_type, filename)


@router.post("/download")
def drive_diagnostics(user: Diagnostics, client: Client):
    result = check_drive_connection(client)
    return JSONResponse(status_code=200 if result["success"] else 500, content=result)
