"""
Excel export service for the Academic Report Engine
Builds the tabular workbook: one header row, one row per valid student
"""

from dataclasses import dataclass
from io import BytesIO
from typing import Tuple

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from models.records import Omission
from utils.errors import EmptyColumnSetError, NoValidRecordsError

SHEET_TITLE = 'Student Data'


@dataclass(frozen=True)
class WorkbookExport:
    content: bytes
    row_count: int
    omissions: Tuple[Omission, ...]


class ExcelExportService:
    """Service for exporting aggregated records to Excel"""

    @staticmethod
    def create_workbook(title=SHEET_TITLE):
        """Create a new workbook with a single titled sheet"""
        wb = openpyxl.Workbook()
        wb.active.title = title
        return wb

    @staticmethod
    def style_header_row(ws, row_num, columns):
        """Apply styling to header row"""
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="000000", end_color="000000", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")

        for col_num, header in enumerate(columns, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment

    @staticmethod
    def auto_adjust_columns(ws, minimum=12, maximum=50):
        """Auto-adjust column widths"""
        for column in ws.columns:
            column_letter = get_column_letter(column[0].column)
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            ws.column_dimensions[column_letter].width = min(max(max_length + 2, minimum), maximum)

    @staticmethod
    def workbook_to_bytes(workbook):
        """Serialize workbook to xlsx bytes"""
        output = BytesIO()
        workbook.save(output)
        return output.getvalue()

    @staticmethod
    def build_workbook(records, columns):
        """Build the student data workbook for the resolved columns.

        Error-marked records get no row and are reported as omissions.
        Metric cells hold the same 2-decimal strings the PDF shows.
        """
        columns = list(columns)
        if not columns:
            raise EmptyColumnSetError("No columns selected or invalid column keys provided for the Excel report.")

        records = list(records)
        valid = [r for r in records if r.ok]
        omissions = tuple(Omission(r.registration_number, r.error) for r in records if not r.ok)
        if not valid:
            raise NoValidRecordsError("No valid student data found for the given IDs.",
                                      detail=[o.identifier for o in omissions])

        wb = ExcelExportService.create_workbook()
        ws = wb.active
        ExcelExportService.style_header_row(ws, 1, [col.label for col in columns])

        for row_num, record in enumerate(valid, 2):
            for col_num, col in enumerate(columns, 1):
                ws.cell(row=row_num, column=col_num, value=col.extract(record))

        ws.freeze_panes = 'A2'
        ExcelExportService.auto_adjust_columns(ws)
        return WorkbookExport(
            content=ExcelExportService.workbook_to_bytes(wb),
            row_count=len(valid),
            omissions=omissions,
        )
