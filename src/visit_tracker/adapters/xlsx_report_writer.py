"""Spreadsheet serialization for report documents."""

from io import BytesIO

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from visit_tracker.domain.reports import ReportDocument


def render_xlsx(document: ReportDocument) -> bytes:
    """Serialize a report document into an .xlsx workbook."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = document.sheet_name
    sheet.append(document.headers)
    for index, column in enumerate(document.columns, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = column.width
    for row in document.rows:
        sheet.append(
            [_cell(row.get(column.key), column.kind) for column in document.columns]
        )
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _cell(value: object, kind: type) -> object:
    if value is None or value == "":
        return None
    if kind in (int, float):
        return kind(value)
    return str(value)
