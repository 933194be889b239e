"""
RAB Report Package

Build cost estimate reports (Rencana Anggaran Biaya) and export them
as Excel workbooks with live formulas or as Word documents.
"""

__version__ = "1.0.0"

from .models import ReportMetadata, LineItem, Report
from .utils import CurrencyFormat, IDR, coerce_number, format_currency
from .exceptions import ExportError, SerializationError, UnsupportedFormatError
from .interfaces import IReportGenerator, IReportRepository, BaseGenerator
from .reports import ConsoleReporter, ExcelReporter, WordReporter
from .exporter import ExportFormat, ExportResult, ReportExporter, build_filename
from .history import ReportHistory

__all__ = [
    # Models
    "ReportMetadata",
    "LineItem",
    "Report",
    # Formatting
    "CurrencyFormat",
    "IDR",
    "coerce_number",
    "format_currency",
    # Errors
    "ExportError",
    "SerializationError",
    "UnsupportedFormatError",
    # Interfaces
    "IReportGenerator",
    "IReportRepository",
    "BaseGenerator",
    # Services
    "ConsoleReporter",
    "ExcelReporter",
    "WordReporter",
    "ExportFormat",
    "ExportResult",
    "ReportExporter",
    "build_filename",
    "ReportHistory",
]
