"""
Console reporting module for RAB reports.

This module provides the ConsoleReporter class for printing a text
preview of a report and its per-category breakdown.
"""

from ..models import Report
from ..utils import (
    COLUMN_HEADERS,
    CurrencyFormat,
    DISCLAIMER_TEXT,
    GRAND_TOTAL_LABEL,
    IDR,
    REPORT_TITLE,
    format_currency,
    format_percentage,
    format_quantity,
)


class ConsoleReporter:
    """
    Reporter for generating console output.
    
    Provides methods for printing the report preview and the share of
    each category in the grand total.
    """
    
    WIDTHS = [5, 14, 26, 8, 8, 16, 18]
    BAR_WIDTH = 30
    
    def __init__(self, currency: CurrencyFormat = None):
        self.currency = currency or IDR
    
    def _format_row(self, values) -> str:
        cells = []
        for value, width in zip(values, self.WIDTHS):
            text = str(value)
            if len(text) > width:
                text = text[:width - 1] + "…"
            cells.append(f"{text:<{width}}")
        return " │ ".join(cells)
    
    def print_preview(self, report: Report) -> None:
        """
        Print the report as it will appear in the exported document.
        
        Args:
            report: Report snapshot
        """
        line_width = sum(self.WIDTHS) + 3 * (len(self.WIDTHS) - 1)
        
        print("\n" + "=" * line_width)
        print(f"{REPORT_TITLE:^{line_width}}")
        print("=" * line_width)
        print(f"Nama Laporan: {report.metadata.title}")
        print(f"Tanggal: {report.metadata.date}")
        print()
        print(self._format_row(COLUMN_HEADERS))
        print("─" * line_width)
        
        for label, item in report.labelled_items():
            print(self._format_row([
                label,
                item.category,
                item.description,
                format_quantity(item.quantity),
                item.unit,
                format_currency(item.unit_price_value, self.currency),
                format_currency(item.line_total, self.currency),
            ]))
        
        print("─" * line_width)
        total = format_currency(report.grand_total, self.currency)
        print(f"{GRAND_TOTAL_LABEL}: {total}")
        print()
        print(DISCLAIMER_TEXT)
    
    def print_category_breakdown(self, report: Report) -> None:
        """Print each category's total and share of the grand total."""
        print("\nPersentase per Kategori")
        print("─" * 80)
        
        breakdown = report.category_breakdown()
        if not breakdown:
            print("  (tidak ada data)")
            return
        
        for category, total, share in breakdown:
            filled = min(max(int(round(share * self.BAR_WIDTH)), 0), self.BAR_WIDTH)
            bar = "█" * filled + "░" * (self.BAR_WIDTH - filled)
            print(f"  {category[:20]:<20} {bar} {format_percentage(share):>8}  "
                  f"{format_currency(total, self.currency)}")
