# services/api/core/project_store.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from adapters.base import SpreadsheetClient
from core.errors import NotFound, UpstreamFailure, ValidationError
from models import ProjectRecord
from models.converters import record_to_row, rows_to_records

logger = logging.getLogger(__name__)

# Wide enough to pick up any extra columns a human adds to the sheet
READ_RANGE = "A2:Z1000"
SAMPLE_RANGE = "A1:Z10"


def _quote_title(title: str) -> str:
    # A1 notation: sheet titles are single-quoted, inner quotes doubled
    return "'" + title.replace("'", "''") + "'"


class ProjectStore:
    """
    The only component that reads or writes the projects sheet.

    - first worksheet (tab) holds the data, row 1 is a header
    - (email, project_title) is the identity of a row
    - no cache, no locking, no retry: every call goes to the sheet and the
      last write wins
    - the client may be given as a factory; it is built on first use, inside
      the same error handling as the read or write that needs it
    """

    def __init__(
        self,
        client: Optional[SpreadsheetClient] = None,
        today: Optional[Callable[[], date]] = None,
        client_factory: Optional[Callable[[], SpreadsheetClient]] = None,
    ) -> None:
        if client is None and client_factory is None:
            raise ValueError("ProjectStore needs a client or a client_factory")
        self._client = client
        self._client_factory = client_factory
        self._today = today or date.today

    @property
    def client(self) -> SpreadsheetClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    # ========== Worksheet helpers ==========

    def _first_sheet(self) -> Dict[str, Any]:
        meta = self.client.get_metadata()
        sheets = meta.get("sheets") or []
        if not sheets:
            raise UpstreamFailure("No sheets found in the spreadsheet")
        first = sheets[0]
        return {
            "title": first.get("title") or "Sheet1",
            "sheet_id": first.get("sheet_id") or 0,
        }

    def _load(self) -> Tuple[Dict[str, Any], List[Tuple[int, ProjectRecord]]]:
        """Read every data row. Raises on any remote failure."""
        sheet = self._first_sheet()
        rows = self.client.get_values(f"{_quote_title(sheet['title'])}!{READ_RANGE}")
        return sheet, rows_to_records(rows)

    def _load_strict(self, operation: str):
        try:
            return self._load()
        except UpstreamFailure:
            raise
        except Exception as e:
            logger.error(f"Failed to read projects for {operation}: {e}")
            raise UpstreamFailure(f"Failed to {operation}", str(e))

    @staticmethod
    def _find(
        indexed: List[Tuple[int, ProjectRecord]], email: str, project_title: str
    ) -> Optional[Tuple[int, ProjectRecord]]:
        for row_number, record in indexed:
            if record.email == email and record.project_title == project_title:
                return row_number, record
        return None

    # ========== Store API ==========

    def list_all(self) -> List[ProjectRecord]:
        """
        All projects in sheet order.

        Soft-fail: a read error is logged and yields [] so the dashboards
        keep rendering.
        """
        try:
            sheet, indexed = self._load()
        except Exception as e:
            logger.error(f"Failed to get projects: {e}")
            return []
        logger.info(f"Retrieved {len(indexed)} projects from sheet '{sheet['title']}'")
        return [record for _, record in indexed]

    def list_by_owner(self, email: str) -> List[ProjectRecord]:
        return [p for p in self.list_all() if p.email == email]

    def upsert(self, record: ProjectRecord) -> ProjectRecord:
        """
        Create or update the row for (email, project_title).

        Updates overwrite the matched row in place; new pairs are appended.
        `last_updated` is always set to today.
        """
        if not record.email or not record.project_title:
            raise ValidationError("Email and project title are required")

        sheet, indexed = self._load_strict("save project")
        today = self._today()
        row = record_to_row(record, today=today)
        title = _quote_title(sheet["title"])

        match = self._find(indexed, record.email, record.project_title)
        try:
            if match:
                row_number, _ = match
                self.client.update_range(f"{title}!A{row_number}:Z{row_number}", [row])
                logger.info(f"Updated project for {record.email}: {record.project_title}")
            else:
                self.client.append_row(f"{title}!A:Z", row)
                logger.info(f"Added new project for {record.email}: {record.project_title}")
        except Exception as e:
            logger.error(f"Failed to add/update project: {e}")
            raise UpstreamFailure("Failed to save project", str(e))

        return record.model_copy(update={"last_updated": today.isoformat()})

    def delete_by_key(self, email: str, project_title: str) -> None:
        """
        Delete the row for (email, project_title).

        Raises:
            NotFound: no such row (nothing is written)
        """
        sheet, indexed = self._load_strict("delete project")
        match = self._find(indexed, email, project_title)
        if not match:
            raise NotFound("Project not found")

        row_number, _ = match
        try:
            self.client.delete_row(sheet["sheet_id"], row_number)
        except Exception as e:
            logger.error(f"Failed to delete project: {e}")
            raise UpstreamFailure("Failed to delete project", str(e))
        logger.info(f"Deleted project for {email}: {project_title}")

    def test_connection(self) -> Dict[str, Any]:
        """
        Connectivity diagnostics for the HR dashboard. Never raises.
        """
        try:
            meta = self.client.get_metadata()
            names = [s.get("title") for s in meta.get("sheets") or [] if s.get("title")]
            if not names:
                raise UpstreamFailure("No sheets found in the spreadsheet")

            sample = self.client.get_values(f"{_quote_title(names[0])}!{SAMPLE_RANGE}")
            title = meta.get("title") or "Untitled"
            return {
                "success": True,
                "metadata": {"title": title, "sheetCount": len(names), "sheetNames": names},
                "sampleDataRows": len(sample),
                "details": f"Successfully connected to Google Sheets API. Sheet: {title}, Rows: {len(sample)}",
            }
        except Exception as e:
            logger.error(f"Google Sheets connection test failed: {e}")
            return {
                "success": False,
                "error": str(e),
                "details": _connection_hint(str(e)),
            }


def _connection_hint(message: str) -> str:
    if "403" in message:
        return "Access denied. The service account doesn't have permission to access this spreadsheet."
    if "404" in message:
        return "Spreadsheet not found. Check the SHEETS_SPREADSHEET_ID setting."
    if "401" in message:
        return "Authentication failed. Check service account credentials and permissions."
    if "timeout" in message.lower() or "timed out" in message.lower():
        return "Request timeout. The API request took too long to complete."
    return "Check service account configuration and Google Sheets API permissions."
