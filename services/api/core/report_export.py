# services/api/core/report_export.py
"""
Project report exports

Renders the full project list as CSV, Excel (openpyxl) or PDF (fpdf2).
All three return raw bytes; the caller picks the filename/content type
via `export_projects`.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import List, Optional, Tuple

from fpdf import FPDF
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from core.drive_client import EXPORT_MIME_TYPES, export_filename
from core.validation import normalize_export_format
from models import ProjectRecord
from models.converters import HEADER_LABELS

logger = logging.getLogger(__name__)

DESCRIPTION_PREVIEW_CHARS = 100


def _num(v) -> str:
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _row_values(p: ProjectRecord) -> List[str]:
    """Display values in sheet column order (last_updated as stored)."""
    return [
        p.email or "",
        p.name or "",
        p.project_title or "",
        p.project_description or "",
        p.status or "",
        p.deadline or "",
        p.last_updated or "",
        p.priority or "",
        p.department or "",
        _num(p.estimated_hours),
        _num(p.actual_hours),
        p.notes or "",
    ]


# ---------- CSV -------------------------------------------------------------

def projects_to_csv(projects: List[ProjectRecord]) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    # header is unquoted, every data field is quoted
    buf.write(",".join(HEADER_LABELS) + "\n")
    for p in projects:
        writer.writerow(_row_values(p))
    return buf.getvalue().rstrip("\n").encode("utf-8")


# ---------- Excel -----------------------------------------------------------

def projects_to_excel(projects: List[ProjectRecord]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Employee Projects"

    ws.append(HEADER_LABELS)
    header_font = Font(bold=True)
    header_fill = PatternFill(fill_type="solid", start_color="FFE6F3FF", end_color="FFE6F3FF")
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill

    for p in projects:
        row = _row_values(p)
        # keep hours numeric in Excel
        row[9] = p.estimated_hours if p.estimated_hours is not None else ""
        row[10] = p.actual_hours if p.actual_hours is not None else ""
        ws.append(row)

    for col_cells in ws.iter_cols(min_row=1, max_row=1):
        ws.column_dimensions[col_cells[0].column_letter].width = 15

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


# ---------- PDF -------------------------------------------------------------

def _latin1(text: str) -> str:
    # core PDF fonts are latin-1 only
    return (text or "").encode("latin-1", "replace").decode("latin-1")


class _ProjectsPdfBuilder:
    """
    Simple vertical-flow report:
      - A4 portrait, margins 15mm, auto page break
      - Title + generation date, then one block per project
      - A thin rule between blocks
    """

    def __init__(self, *, title: str, generated_on: date):
        self._pdf = FPDF(orientation="P", unit="mm", format="A4")
        self._pdf.set_auto_page_break(auto=True, margin=15)
        self._pdf.add_page()
        self._pdf.set_title(title)

        self._pdf.set_font("Helvetica", "B", 20)
        self._pdf.cell(0, 10, _latin1(title), new_x="LMARGIN", new_y="NEXT")
        self._pdf.set_font("Helvetica", "", 12)
        self._pdf.cell(0, 8, f"Generated on: {generated_on.strftime('%m/%d/%Y')}", new_x="LMARGIN", new_y="NEXT")
        self._pdf.ln(6)

        self.content_w = self._pdf.w - self._pdf.l_margin - self._pdf.r_margin

    def add_project(self, index: int, p: ProjectRecord) -> None:
        pdf = self._pdf
        pdf.set_font("Helvetica", "B", 14)
        pdf.multi_cell(0, 7, _latin1(f"Project {index}: {p.project_title}"), new_x="LMARGIN", new_y="NEXT")

        pdf.set_font("Helvetica", "", 10)
        lines = [
            f"Employee: {p.name} ({p.email})",
            f"Status: {p.status}",
            f"Priority: {p.priority}",
            f"Deadline: {p.deadline}",
            f"Department: {p.department or 'N/A'}",
        ]
        if p.project_description:
            desc = p.project_description
            if len(desc) > DESCRIPTION_PREVIEW_CHARS:
                desc = desc[:DESCRIPTION_PREVIEW_CHARS] + "..."
            lines.append(f"Description: {desc}")
        for line in lines:
            pdf.multi_cell(0, 5, _latin1(line), new_x="LMARGIN", new_y="NEXT")

        pdf.ln(3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + self.content_w, y)
        pdf.ln(4)

    def build(self) -> bytes:
        return bytes(self._pdf.output())


def projects_to_pdf(projects: List[ProjectRecord], generated_on: Optional[date] = None) -> bytes:
    report = _ProjectsPdfBuilder(
        title="Employee Projects Report",
        generated_on=generated_on or date.today(),
    )
    for i, p in enumerate(projects, start=1):
        report.add_project(i, p)
    return report.build()


# ---------- Dispatcher ------------------------------------------------------

def export_projects(projects: List[ProjectRecord], fmt: str) -> Tuple[bytes, str, str]:
    """
    Render `projects` in the requested format.

    Returns:
        (file bytes, content type, filename)

    Raises:
        ValidationError: unsupported format
    """
    fmt = normalize_export_format(fmt)
    if fmt == "csv":
        data = projects_to_csv(projects)
    elif fmt == "excel":
        data = projects_to_excel(projects)
    else:
        data = projects_to_pdf(projects)

    logger.info(f"Exported {len(projects)} projects as {fmt.upper()}")
    return data, EXPORT_MIME_TYPES[fmt], export_filename(fmt)
