# services/api/core/drive_client.py
from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Tuple

from googleapiclient.discovery import build

from core.errors import UpstreamFailure
from core.validation import normalize_export_format

logger = logging.getLogger(__name__)

# Drive export MIME type per public format name
EXPORT_MIME_TYPES = {
    "csv": "text/csv",
    "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}

FILE_EXTENSIONS = {
    "csv": "csv",
    "excel": "xlsx",
    "pdf": "pdf",
}


def export_filename(fmt: str, today: date | None = None) -> str:
    """employee-projects-YYYY-MM-DD.<ext>"""
    today = today or date.today()
    return f"employee-projects-{today.isoformat()}.{FILE_EXTENSIONS[fmt]}"


def build_drive_service(credentials):
    """
    Construct a Google Drive v3 service client from already-scoped
    credentials (the spreadsheet's service account).
    """
    service = build(
        "drive",
        "v3",
        credentials=credentials,
        cache_discovery=False,
    )
    logger.info("Initialized Google Drive client using service account credentials.")
    return service


def export_file(service, file_id: str, mime_type: str) -> bytes:
    """Export a Google Workspace file to bytes in the given MIME type."""
    data = service.files().export(fileId=file_id, mimeType=mime_type).execute()
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def get_file_metadata(service, file_id: str) -> Dict[str, Any]:
    return service.files().get(
        fileId=file_id,
        fields="id, name, mimeType, size, createdTime, modifiedTime",
    ).execute()


def _friendly_export_error(exc: Exception, fmt: str) -> str:
    msg = str(exc)
    status = getattr(getattr(exc, "resp", None), "status", None)
    if "too large" in msg.lower():
        return (
            "The Google Sheet is too large to export in this format. "
            "Try reducing the amount of data or use CSV format."
        )
    if status == 403 or "permission" in msg.lower():
        return (
            "Permission denied: the service account does not have access to the "
            "Google Sheet. Share the sheet with the service account email."
        )
    if status == 404 or "not found" in msg.lower():
        return "Google Sheet was not found. Check SHEETS_SPREADSHEET_ID."
    return f"Export as {fmt} failed: {msg}"


def download_sheet_file(client, fmt: str) -> Tuple[bytes, str, str]:
    """
    Download the backing spreadsheet directly through Drive export.

    Returns:
        (file bytes, content type, filename)

    Raises:
        ValidationError: unsupported format (before any remote call)
        UpstreamFailure: the Drive export failed
    """
    fmt = normalize_export_format(fmt)
    mime_type = EXPORT_MIME_TYPES[fmt]

    logger.info(f"Exporting sheet as {mime_type}")
    try:
        data = client.export_as(mime_type)
    except Exception as e:
        logger.error(f"Sheet export failed ({fmt}): {e}")
        raise UpstreamFailure("Failed to download sheet data", _friendly_export_error(e, fmt))

    filename = export_filename(fmt)
    logger.info(f"Downloaded {len(data)} bytes as {filename}")
    return data, mime_type, filename


def check_drive_connection(client) -> Dict[str, Any]:
    """
    Check that the spreadsheet's Drive metadata is readable and that a CSV
    export works. Never raises; returns a result dict.
    """
    now = datetime.now(timezone.utc).isoformat()
    try:
        meta = client.get_file_info()
        sample = client.export_as(EXPORT_MIME_TYPES["csv"])
        return {
            "success": True,
            "fileMetadata": {
                "id": meta.get("id"),
                "name": meta.get("name"),
                "mimeType": meta.get("mimeType"),
                "size": meta.get("size"),
                "createdTime": meta.get("createdTime"),
                "modifiedTime": meta.get("modifiedTime"),
            },
            "testExportSize": min(len(sample), 1024),
            "supportedFormats": list(EXPORT_MIME_TYPES),
            "timestamp": now,
        }
    except Exception as e:
        logger.error(f"Google Drive connection test failed: {e}")
        return {
            "success": False,
            "error": str(e),
            "timestamp": now,
            "help": "Check that the Google Sheet is shared with the service account and that the Drive API is enabled.",
        }
