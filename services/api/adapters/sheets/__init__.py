# services/api/adapters/sheets/__init__.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import gspread
from google.oauth2.service_account import Credentials

from core.drive_client import build_drive_service, export_file, get_file_metadata

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


def _sa_credentials_from_json_or_path(google_sa_json: str) -> Credentials:
    """
    Accepts either:
      - absolute/relative path to a service-account JSON file, OR
      - a literal JSON string.
    Returns service-account credentials scoped for Sheets + Drive.
    """
    if not google_sa_json:
        raise ValueError("GOOGLE_SA_JSON is required (path to file or inline JSON).")

    # Try to treat as inline JSON first
    try:
        parsed = json.loads(google_sa_json)
        return Credentials.from_service_account_info(parsed, scopes=SCOPES)
    except json.JSONDecodeError:
        # Not JSON; treat as file path
        return Credentials.from_service_account_file(google_sa_json, scopes=SCOPES)


class GoogleSheetsClient:
    """
    Thin gspread wrapper over ONE spreadsheet:
    - raw values API calls only (no header handling, no caching)
    - no retries: failures propagate to the record store
    - Drive export for file downloads
    """

    def __init__(self, google_sa_json: Optional[str], spreadsheet_id: Optional[str]) -> None:
        if not google_sa_json or not spreadsheet_id:
            raise ValueError("GoogleSheetsClient requires GOOGLE_SA_JSON and SHEETS_SPREADSHEET_ID")

        creds = _sa_credentials_from_json_or_path(google_sa_json)
        self.spreadsheet_id = spreadsheet_id
        self.gc = gspread.authorize(creds)
        self.ss = self.gc.open_by_key(spreadsheet_id)
        self._drive = build_drive_service(creds)

    # ========== SpreadsheetClient API ==========

    def get_metadata(self) -> Dict[str, Any]:
        meta = self.ss.fetch_sheet_metadata()
        sheets = [
            {
                "title": (s.get("properties") or {}).get("title", ""),
                "sheet_id": (s.get("properties") or {}).get("sheetId", 0),
            }
            for s in meta.get("sheets", [])
        ]
        return {
            "title": (meta.get("properties") or {}).get("title", ""),
            "sheets": sheets,
        }

    def get_values(self, a1_range: str) -> List[List[str]]:
        resp = self.ss.values_get(a1_range)
        return resp.get("values", []) or []

    def update_range(self, a1_range: str, values: List[List[Any]]) -> None:
        self.ss.values_update(
            a1_range,
            params={"valueInputOption": "RAW"},
            body={"values": values},
        )

    def append_row(self, a1_range: str, row: List[Any]) -> None:
        self.ss.values_append(
            a1_range,
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            body={"values": [row]},
        )

    def delete_row(self, sheet_id: int, row_number: int) -> None:
        self.ss.batch_update(
            {
                "requests": [
                    {
                        "deleteDimension": {
                            "range": {
                                "sheetId": sheet_id,
                                "dimension": "ROWS",
                                "startIndex": row_number - 1,  # 0-based, inclusive
                                "endIndex": row_number,
                            }
                        }
                    }
                ]
            }
        )

    def export_as(self, mime_type: str) -> bytes:
        return export_file(self._drive, self.spreadsheet_id, mime_type)

    def get_file_info(self) -> Dict[str, Any]:
        """Drive metadata of the spreadsheet file (diagnostics only)."""
        return get_file_metadata(self._drive, self.spreadsheet_id)
