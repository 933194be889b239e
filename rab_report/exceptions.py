"""
Exceptions raised while exporting reports.
"""


class ExportError(Exception):
    """Base class for export failures."""


class SerializationError(ExportError):
    """The workbook or document library could not encode the report."""
    
    def __init__(self, format_name: str, reason: str):
        self.format_name = format_name
        self.reason = reason
        super().__init__(f"Could not serialize {format_name} report: {reason}")


class UnsupportedFormatError(ExportError, ValueError):
    """Requested export format is not known."""
