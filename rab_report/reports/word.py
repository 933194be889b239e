"""
Word report generation module.

Builds the printable RAB document. Word tables cannot hold formulas,
so every amount is rendered to a currency string at generation time.
"""

import io

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Emu, Pt

from ..interfaces import BaseGenerator
from ..models import LineItem, Report
from ..utils import (
    COLUMN_HEADERS,
    DISCLAIMER_TEXT,
    GRAND_TOTAL_LABEL,
    REPORT_TITLE,
    format_currency,
    format_quantity,
)


class WordReporter(BaseGenerator):
    """
    Reporter for generating Word documents.
    
    Document layout, top to bottom: centered heading, report name and
    date, the cost table, a bold grand total line and a closing note.
    """
    
    extension = "docx"
    mime_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    format_name = "Word document"
    
    TABLE_STYLE = "Table Grid"
    
    def row_values(self, label: str, item: LineItem) -> list:
        """Cell texts for one line item."""
        return [
            label,
            item.category,
            item.description,
            format_quantity(item.quantity),
            item.unit,
            format_currency(item.unit_price_value, self.currency),
            format_currency(item.line_total, self.currency),
        ]
    
    def grand_total_text(self, report: Report) -> str:
        """Text of the bold grand total line."""
        return f"{GRAND_TOTAL_LABEL}: {format_currency(report.grand_total, self.currency)}"
    
    def _render(self, report: Report) -> bytes:
        doc = Document()
        self._setup_styles(doc)
        
        title = doc.add_heading(REPORT_TITLE, level=1)
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        
        doc.add_paragraph(f"Nama Laporan: {report.metadata.title}")
        doc.add_paragraph(f"Tanggal: {report.metadata.date}")
        doc.add_paragraph("")
        
        self._add_table(doc, report)
        
        doc.add_paragraph("")
        total = doc.add_paragraph()
        total.add_run(self.grand_total_text(report)).bold = True
        doc.add_paragraph(DISCLAIMER_TEXT)
        
        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()
    
    def _setup_styles(self, doc):
        """Configure document-wide styles."""
        font = doc.styles['Normal'].font
        font.name = 'Calibri'
        font.size = Pt(11)
    
    def _add_table(self, doc, report: Report):
        """Add the full-width cost table."""
        table = doc.add_table(rows=1, cols=len(COLUMN_HEADERS))
        table.style = self.TABLE_STYLE
        table.autofit = False
        
        for cell, header in zip(table.rows[0].cells, COLUMN_HEADERS):
            cell.paragraphs[0].add_run(header).bold = True
        
        for label, item in report.labelled_items():
            cells = table.add_row().cells
            for cell, value in zip(cells, self.row_values(label, item)):
                cell.text = value
        
        # Spread the columns over the usable page width
        section = doc.sections[0]
        usable = section.page_width - section.left_margin - section.right_margin
        column_width = Emu(int(usable / len(COLUMN_HEADERS)))
        for column in table.columns:
            column.width = column_width
            for cell in column.cells:
                cell.width = column_width
