"""
Unit tests for report generators.
"""

import io

import pytest
from docx import Document
from openpyxl import load_workbook

from rab_report.exceptions import SerializationError
from rab_report.models import LineItem, Report, ReportMetadata
from rab_report.reports.console import ConsoleReporter
from rab_report.reports.excel import ExcelReporter
from rab_report.reports.word import WordReporter
from rab_report.utils import COLUMN_HEADERS


def evaluate_row_total(ws, row):
    """Evaluate a '=D{r}*F{r}' formula from the referenced cells."""
    formula = ws.cell(row=row, column=7).value
    assert formula == f"=D{row}*F{row}"
    return ws.cell(row=row, column=4).value * ws.cell(row=row, column=6).value


def evaluate_sum(ws, formula):
    """Evaluate a '=SUM(Gx:Gy)' formula by summing the evaluated row totals."""
    assert formula.startswith("=SUM(G") and formula.endswith(")")
    start, end = formula[len("=SUM("):-1].split(":")
    total = 0
    for row in range(int(start[1:]), int(end[1:]) + 1):
        if ws.cell(row=row, column=7).value is not None:
            total += evaluate_row_total(ws, row)
    return total


def document_texts(data):
    doc = Document(io.BytesIO(data))
    paragraphs = [p.text for p in doc.paragraphs]
    tables = [[[cell.text for cell in row.cells] for row in table.rows] for table in doc.tables]
    return paragraphs, tables


class TestExcelReporter:
    """Tests for ExcelReporter class."""
    
    @pytest.fixture
    def reporter(self):
        return ExcelReporter()
    
    @pytest.fixture
    def workbook(self, reporter, sample_report):
        wb = load_workbook(io.BytesIO(reporter.generate(sample_report)))
        yield wb
        wb.close()
    
    def test_sheets(self, workbook):
        """Test both sheets exist in order."""
        assert workbook.sheetnames == ["RAB", "Penjelasan Rumus"]
    
    def test_title_block(self, workbook):
        """Test title, merge and metadata lines."""
        ws = workbook["RAB"]
        
        assert ws["A1"].value == "LAPORAN RENCANA ANGGARAN BIAYA"
        assert ws["A1"].font.bold
        assert ws["A1"].alignment.horizontal == "center"
        assert "A1:G1" in [str(r) for r in ws.merged_cells.ranges]
        assert ws["A2"].value == "Nama Laporan: Proyek X"
        assert ws["A3"].value == "Tanggal: 2025-01-31"
        assert all(ws.cell(row=4, column=col).value is None for col in range(1, 8))
    
    def test_header_row(self, workbook):
        """Test the bold header row."""
        ws = workbook["RAB"]
        headers = [cell.value for cell in ws[5]]
        
        assert headers == COLUMN_HEADERS
        assert all(cell.font.bold for cell in ws[5])
    
    def test_data_rows(self, workbook):
        """Test literal values and per-row formulas."""
        ws = workbook["RAB"]
        
        assert [ws.cell(row=6, column=col).value for col in range(1, 7)] == \
            ["1", "Material", "Semen", 10, "zak", 10]
        assert ws["G6"].value == "=D6*F6"
        assert ws["G7"].value == "=D7*F7"
        assert ws["G8"].value == "=D8*F8"
    
    def test_row_formulas_evaluate_to_line_totals(self, workbook, sample_report):
        """Test each row formula matches quantity × unit price."""
        ws = workbook["RAB"]
        for index, item in enumerate(sample_report.items):
            assert evaluate_row_total(ws, 6 + index) == item.line_total
    
    def test_grand_total_formula(self, workbook, sample_report):
        """Test the grand total is a SUM over the total column."""
        ws = workbook["RAB"]
        
        assert ws["F9"].value == "Grand Total"
        assert ws["G9"].value == "=SUM(G6:G8)"
        assert ws["G9"].font.bold
        assert evaluate_sum(ws, ws["G9"].value) == sample_report.grand_total == 175
    
    def test_missing_label_uses_position(self, workbook):
        """Test blank sequence label at position 3 becomes 3."""
        assert workbook["RAB"]["A8"].value == 3
    
    def test_missing_numbers_written_as_zero(self, reporter, sample_metadata):
        """Test blank quantity/price are written as 0, never empty."""
        report = Report(metadata=sample_metadata, items=[
            LineItem(description="Kosong", quantity=None, unit_price=None),
            LineItem(description="Harga saja", quantity=None, unit_price=5000),
        ])
        wb = load_workbook(io.BytesIO(reporter.generate(report)))
        ws = wb["RAB"]
        
        assert ws["D6"].value == 0
        assert ws["F6"].value == 0
        assert evaluate_row_total(ws, 6) == 0
        assert evaluate_row_total(ws, 7) == 0
        assert evaluate_sum(ws, ws["G8"].value) == 0
        wb.close()
    
    def test_empty_report(self, reporter, empty_report):
        """Test empty report keeps header and a grand total of 0."""
        wb = load_workbook(io.BytesIO(reporter.generate(empty_report)))
        ws = wb["RAB"]
        
        assert [cell.value for cell in ws[5]] == COLUMN_HEADERS
        assert all(ws.cell(row=6, column=col).value is None for col in range(1, 8))
        assert ws["F7"].value == "Grand Total"
        assert ws["G7"].value == "=SUM(G6:G6)"
        assert evaluate_sum(ws, ws["G7"].value) == 0
        wb.close()
    
    def test_formula_like_text_stays_text(self, reporter, sample_metadata):
        """Test user text starting with '=' is not stored as a formula."""
        report = Report(metadata=sample_metadata, items=[
            LineItem(description="=1+1", quantity=1, unit_price=1),
        ])
        wb = load_workbook(io.BytesIO(reporter.generate(report)))
        
        assert wb["RAB"]["C6"].data_type == "s"
        assert wb["RAB"]["C6"].value == "=1+1"
        wb.close()
    
    def test_reference_sheet(self, workbook):
        """Test formula explanations use the main sheet's ranges."""
        ws = workbook["Penjelasan Rumus"]
        rows = [[cell.value for cell in row] for row in ws.iter_rows(min_row=1, max_row=5)]
        
        assert rows[0] == ["Rumus", "Deskripsi", "Contoh"]
        assert [row[0] for row in rows[1:]] == ["SUM", "AVERAGE", "PERCENTAGE", "TOTAL"]
        assert rows[1][2] == "Contoh =SUM(G6:G8)"
        assert rows[2][2] == "Contoh =AVERAGE(G6:G8)"
        assert rows[3][2] == "Contoh =G6/$G$9"
        assert rows[4][2] == "Contoh =D6*F6"
    
    def test_order_preserved(self, reporter, sample_metadata):
        """Test rows are written in input order, not sorted."""
        report = Report(metadata=sample_metadata, items=[
            LineItem(category="Z", description="pertama"),
            LineItem(category="A", description="kedua"),
        ])
        wb = load_workbook(io.BytesIO(reporter.generate(report)))
        
        assert wb["RAB"]["C6"].value == "pertama"
        assert wb["RAB"]["C7"].value == "kedua"
        wb.close()
    
    def test_idempotent(self, reporter, sample_report):
        """Test two runs produce the same cell content."""
        def cells(data):
            wb = load_workbook(io.BytesIO(data))
            content = {
                name: [[c.value for c in row] for row in wb[name].iter_rows()]
                for name in wb.sheetnames
            }
            wb.close()
            return content
        
        assert cells(reporter.generate(sample_report)) == cells(reporter.generate(sample_report))
    
    def test_does_not_mutate_report(self, reporter, sample_report):
        before = sample_report.to_dict()
        reporter.generate(sample_report)
        assert sample_report.to_dict() == before
    
    def test_illegal_character_raises(self, reporter, sample_metadata):
        """Test library encoding errors surface as SerializationError."""
        report = Report(metadata=sample_metadata, items=[
            LineItem(description="bad\x01text", quantity=1, unit_price=1),
        ])
        with pytest.raises(SerializationError) as exc_info:
            reporter.generate(report)
        
        assert exc_info.value.format_name == "Excel workbook"
        assert exc_info.value.__cause__ is not None
    
    def test_data_bounds(self):
        assert ExcelReporter.data_bounds(3) == (6, 8, 9)
        assert ExcelReporter.data_bounds(1) == (6, 6, 7)
        assert ExcelReporter.data_bounds(0) == (6, 6, 7)


class TestWordReporter:
    """Tests for WordReporter class."""
    
    @pytest.fixture
    def reporter(self):
        return WordReporter()
    
    def test_document_layout(self, reporter, sample_report):
        """Test paragraphs appear in fixed order."""
        doc = Document(io.BytesIO(reporter.generate(sample_report)))
        paragraphs = [p.text for p in doc.paragraphs]
        
        assert paragraphs == [
            "LAPORAN RENCANA ANGGARAN BIAYA",
            "Nama Laporan: Proyek X",
            "Tanggal: 2025-01-31",
            "",
            "",
            "Total Keseluruhan: Rp 175",
            "Catatan: Dokumen ini dihasilkan otomatis oleh sistem.",
        ]
        assert doc.paragraphs[0].style.name == "Heading 1"
        assert len(doc.sections) == 1
    
    def test_grand_total_is_bold(self, reporter, sample_report):
        doc = Document(io.BytesIO(reporter.generate(sample_report)))
        total = doc.paragraphs[5]
        
        assert total.runs[0].bold
    
    def test_table(self, reporter, sample_report):
        """Test header and literal row values."""
        _, tables = document_texts(reporter.generate(sample_report))
        
        assert len(tables) == 1
        table = tables[0]
        assert table[0] == COLUMN_HEADERS
        assert table[1] == ["1", "Material", "Semen", "10", "zak", "Rp 10", "Rp 100"]
        assert table[2] == ["2", "Material", "Pasir", "5", "m3", "Rp 10", "Rp 50"]
        assert table[3] == ["3", "Upah", "Tukang", "1", "hari", "Rp 25", "Rp 25"]
    
    def test_grand_total_matches_sum(self, reporter, sample_metadata):
        """Test the shown total equals the sum of quantity × price."""
        items = [
            LineItem(quantity=2.5, unit_price=150000),
            LineItem(quantity=12, unit_price=87500),
            LineItem(quantity=None, unit_price=99999),
        ]
        report = Report(metadata=sample_metadata, items=items)
        paragraphs, _ = document_texts(reporter.generate(report))
        
        assert "Total Keseluruhan: Rp 1.425.000" in paragraphs
        assert reporter.grand_total_text(report) == "Total Keseluruhan: Rp 1.425.000"
    
    def test_empty_report(self, reporter, empty_report):
        """Test empty report has a header-only table and Rp 0."""
        paragraphs, tables = document_texts(reporter.generate(empty_report))
        
        assert tables == [[COLUMN_HEADERS]]
        assert "Total Keseluruhan: Rp 0" in paragraphs
    
    def test_very_large_totals(self, reporter, sample_metadata):
        """Test totals beyond 28 digits render instead of failing."""
        report = Report(metadata=sample_metadata, items=[
            LineItem(quantity=1e15, unit_price=1e15),
        ])
        paragraphs, tables = document_texts(reporter.generate(report))
        
        assert tables[0][1][6] == "Rp 1" + ".000" * 10
        assert "Total Keseluruhan: Rp 1" + ".000" * 10 in paragraphs
    
    def test_idempotent(self, reporter, sample_report):
        first = document_texts(reporter.generate(sample_report))
        second = document_texts(reporter.generate(sample_report))
        assert first == second
    
    def test_illegal_character_raises(self, reporter):
        """Test XML-incompatible text surfaces as SerializationError."""
        report = Report(metadata=ReportMetadata(title="bad\x00title"))
        with pytest.raises(SerializationError):
            reporter.generate(report)


class TestConsoleReporter:
    """Tests for ConsoleReporter class."""
    
    @pytest.fixture
    def reporter(self):
        return ConsoleReporter()
    
    def test_print_preview(self, reporter, sample_report, capsys):
        """Test preview output."""
        reporter.print_preview(sample_report)
        
        captured = capsys.readouterr()
        assert "LAPORAN RENCANA ANGGARAN BIAYA" in captured.out
        assert "Nama Laporan: Proyek X" in captured.out
        assert "Semen" in captured.out
        assert "Total Keseluruhan: Rp 175" in captured.out
    
    def test_print_category_breakdown(self, reporter, sample_report, capsys):
        """Test category percentages are printed."""
        reporter.print_category_breakdown(sample_report)
        
        captured = capsys.readouterr()
        assert "Material" in captured.out
        assert "85.71%" in captured.out
        assert "14.29%" in captured.out
    
    def test_breakdown_with_overflowing_item(self, reporter, capsys):
        """Test an item whose total overflows prints as a 0% share."""
        report = Report(items=[
            LineItem(category="Besar", quantity=1e200, unit_price=1e200),
            LineItem(category="Material", quantity=2, unit_price=50),
        ])
        reporter.print_category_breakdown(report)
        
        captured = capsys.readouterr()
        assert "0.00%" in captured.out
        assert "100.00%" in captured.out
    
    def test_empty_breakdown(self, reporter, empty_report, capsys):
        reporter.print_category_breakdown(empty_report)
        
        captured = capsys.readouterr()
        assert "tidak ada data" in captured.out
