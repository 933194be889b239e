"""
Excel report generation module.

This module provides the ExcelReporter class, which builds the RAB
workbook: a cost table whose totals are live formulas, plus a sheet
explaining the formulas used.
"""

import io
from typing import Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from ..interfaces import BaseGenerator
from ..models import Report
from ..utils import COLUMN_HEADERS, CurrencyFormat, REPORT_TITLE


class ExcelReporter(BaseGenerator):
    """
    Reporter for generating Excel workbooks.
    
    Creates a two-sheet workbook with:
    - RAB: title block, cost table with per-row =D*F formulas and a
      =SUM grand total
    - Penjelasan Rumus: documentation of the formulas used
    """
    
    extension = "xlsx"
    mime_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    format_name = "Excel workbook"
    serialization_errors = (ValueError, IllegalCharacterError)
    
    MAIN_SHEET = "RAB"
    REFERENCE_SHEET = "Penjelasan Rumus"
    
    HEADER_ROW = 5
    FIRST_DATA_ROW = 6
    COLUMN_WIDTHS = [6, 20, 32, 12, 12, 16, 16]
    REFERENCE_HEADERS = ["Rumus", "Deskripsi", "Contoh"]
    REFERENCE_WIDTHS = [16, 40, 40]
    
    def __init__(self, currency: CurrencyFormat = None):
        """Initialize reporter with styles."""
        super().__init__(currency)
        
        # Define styles
        self.title_font = Font(bold=True, size=14)
        self.header_font = Font(bold=True, color="FFFFFF", size=11)
        self.header_fill = PatternFill(start_color="2B6CB0", end_color="2B6CB0", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        
        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        
        self.summary_font = Font(bold=True)
        self.summary_fill = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
    
    @classmethod
    def data_bounds(cls, item_count: int) -> Tuple[int, int, int]:
        """
        Row numbers used for a report with item_count items.
        
        An empty report keeps one blank data row so that the grand total
        still sums a real range without referencing itself.
        
        Returns:
            (first data row, last data row, grand total row)
        """
        first = cls.FIRST_DATA_ROW
        last = first + max(item_count, 1) - 1
        return first, last, last + 1
    
    def _render(self, report: Report) -> bytes:
        wb = Workbook()
        
        # Create sheets
        self._create_main_sheet(wb, report)
        self._create_reference_sheet(wb, report)
        
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
    
    def _create_main_sheet(self, wb, report: Report):
        """Create the cost table sheet."""
        ws = wb.active
        ws.title = self.MAIN_SHEET
        last_column = get_column_letter(len(COLUMN_HEADERS))
        
        # Title block
        ws.merge_cells(f"A1:{last_column}1")
        ws["A1"] = REPORT_TITLE
        ws["A1"].font = self.title_font
        ws["A1"].alignment = Alignment(horizontal="center")
        
        ws["A2"] = f"Nama Laporan: {report.metadata.title}"
        ws["A3"] = f"Tanggal: {report.metadata.date}"
        
        # Table header
        for col, header in enumerate(COLUMN_HEADERS, 1):
            cell = ws.cell(row=self.HEADER_ROW, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment
            cell.border = self.thin_border
        
        first_row, last_row, total_row = self.data_bounds(len(report.items))
        money_format = self.currency.excel_number_format
        
        for index, item in enumerate(report.items):
            row = first_row + index
            label = item.sequence_label.strip() or index + 1
            values = [
                label,
                item.category,
                item.description,
                item.quantity_value,
                item.unit,
                item.unit_price_value,
                f"=D{row}*F{row}",
            ]
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = self.thin_border
                # User text that happens to start with '=' stays text
                if col < 7 and isinstance(value, str) and value.startswith("="):
                    cell.data_type = "s"
            ws.cell(row=row, column=6).number_format = money_format
            ws.cell(row=row, column=7).number_format = money_format
        
        # Grand total
        ws.cell(row=total_row, column=6, value="Grand Total")
        ws.cell(row=total_row, column=7, value=f"=SUM(G{first_row}:G{last_row})")
        ws.cell(row=total_row, column=7).number_format = money_format
        for col in range(1, len(COLUMN_HEADERS) + 1):
            cell = ws.cell(row=total_row, column=col)
            cell.font = self.summary_font
            cell.fill = self.summary_fill
            cell.border = self.thin_border
        
        # Column widths
        for col, width in enumerate(self.COLUMN_WIDTHS, 1):
            ws.column_dimensions[get_column_letter(col)].width = width
    
    def _create_reference_sheet(self, wb, report: Report):
        """Create the formula explanation sheet."""
        ws = wb.create_sheet(self.REFERENCE_SHEET)
        first_row, last_row, total_row = self.data_bounds(len(report.items))
        total_range = f"G{first_row}:G{last_row}"
        
        for col, header in enumerate(self.REFERENCE_HEADERS, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = Font(bold=True)
            cell.border = self.thin_border
        
        notes = [
            ("SUM", "Menjumlahkan data.", f"Contoh =SUM({total_range})"),
            ("AVERAGE", "Menghitung rata-rata.", f"Contoh =AVERAGE({total_range})"),
            ("PERCENTAGE", "Menghitung persen.", f"Contoh =G{first_row}/$G${total_row}"),
            ("TOTAL", "Menghitung total biaya per item.", f"Contoh =D{first_row}*F{first_row}"),
        ]
        for row, note in enumerate(notes, 2):
            for col, value in enumerate(note, 1):
                ws.cell(row=row, column=col, value=value).border = self.thin_border
        
        for col, width in enumerate(self.REFERENCE_WIDTHS, 1):
            ws.column_dimensions[get_column_letter(col)].width = width
