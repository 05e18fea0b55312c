"""
Spreadsheet client interface for the project tracker.
Defines the contract the record store needs from the backing spreadsheet.
"""

from typing import Protocol, List, Dict, Any


class SpreadsheetClient(Protocol):
    """
    Protocol defining the thin wrapper over the remote spreadsheet API.

    This allows swapping the real Google Sheets client for an in-memory
    fake in tests without changing the record store or router code.

    NOTE:
    - Ranges are A1 strings that already include the worksheet title,
      e.g. "'Sheet1'!A2:Z1000".
    - Row numbers are 1-based sheet row numbers (row 1 is the header).
    """

    def get_metadata(self) -> Dict[str, Any]:
        """
        Return spreadsheet metadata.

        Returns:
            Dict with keys:
              - title: spreadsheet title
              - sheets: list of {"title": str, "sheet_id": int} in tab order
        """
        ...

    def get_values(self, a1_range: str) -> List[List[str]]:
        """
        Read a range. Trailing empty cells and rows may be omitted,
        exactly like the Sheets values API.
        """
        ...

    def update_range(self, a1_range: str, values: List[List[Any]]) -> None:
        """Overwrite a range with RAW values."""
        ...

    def append_row(self, a1_range: str, row: List[Any]) -> None:
        """Append one row after the table found in `a1_range` (INSERT_ROWS, RAW)."""
        ...

    def delete_row(self, sheet_id: int, row_number: int) -> None:
        """Delete one row (1-based) from the worksheet with the given sheet id."""
        ...

    def export_as(self, mime_type: str) -> bytes:
        """Export the whole spreadsheet (text/csv exports only the first tab)."""
        ...

    def get_file_info(self) -> Dict[str, Any]:
        """
        Drive file metadata for the spreadsheet
        (id, name, mimeType, size, createdTime, modifiedTime).
        """
        ...
