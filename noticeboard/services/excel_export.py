"""
Spreadsheet export of registrations.

With a notice's field list the columns are fixed: ``Date`` followed by every
field label in declaration order. Without one, every registration is
flattened (top-level columns plus detail keys) and the columns are the union
of all keys seen, in first-seen order.
"""
import io
from typing import Any, Dict, List, Optional, Tuple

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill

from noticeboard.models.answers import display_value
from noticeboard.models.notice import FormFieldDescriptor
from noticeboard.utils.helpers import format_date

SHEET_TITLE = "Registrations"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Bookkeeping keys left out of the flattened export
HIDDEN_KEYS = ("_id", "__v", "updated_at", "details")

Table = Tuple[List[str], List[List[Any]]]


def _cell(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, dict) and "kind" in value:
        return display_value(value) or None
    return format_date(value) if hasattr(value, "strftime") else str(value)


def _declared_table(registrations: List[Dict], fields: List[FormFieldDescriptor]) -> Table:
    columns = ["Date"] + [f.label for f in fields]
    rows = []
    for reg in registrations:
        details = reg.get("details") or {}
        row: List[Any] = [format_date(reg.get("created_at")) or None]
        for field in fields:
            # older documents were keyed by label
            answer = details.get(field.id, details.get(field.label))
            row.append(_cell(answer))
        rows.append(row)
    return columns, rows


def _flattened_table(registrations: List[Dict]) -> Table:
    columns: List[str] = ["Date"]
    flat_rows: List[Dict[str, Any]] = []
    for reg in registrations:
        flat: Dict[str, Any] = {"Date": format_date(reg.get("created_at")) or None}
        for key, value in reg.items():
            if key not in HIDDEN_KEYS:
                flat[key] = _cell(value)
        for key, value in (reg.get("details") or {}).items():
            flat[key] = _cell(value)
        for key in flat:
            if key not in columns:
                columns.append(key)
        flat_rows.append(flat)
    rows = [[flat.get(col) for col in columns] for flat in flat_rows]
    return columns, rows


def build_export_table(
    registrations: List[Dict],
    fields: Optional[List[FormFieldDescriptor]] = None
) -> Table:
    """Project stored registrations into spreadsheet columns and rows"""
    if fields:
        return _declared_table(registrations, fields)
    return _flattened_table(registrations)


def write_workbook(columns: List[str], rows: List[List[Any]]) -> io.BytesIO:
    """Render a table as an in-memory .xlsx stream"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill("solid", fgColor="1E3A5F")

    for ci, col in enumerate(columns, 1):
        cell = ws.cell(row=1, column=ci)
        cell.value = col
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    for ri, row in enumerate(rows, 2):
        for ci, value in enumerate(row, 1):
            ws.cell(row=ri, column=ci).value = value

    # Auto-size columns
    for col in ws.columns:
        max_len = max((len(str(cell.value or "")) for cell in col), default=10)
        ws.column_dimensions[col[0].column_letter].width = min(max_len + 4, 40)

    stream = io.BytesIO()
    wb.save(stream)
    stream.seek(0)
    return stream
