"""
Export coordination for RAB reports.

ReportExporter picks the generator for a format, derives the file name
and hands back the bytes or writes them to disk. Each call works on its
own Report snapshot, so several exports can run at the same time.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .exceptions import ExportError, SerializationError, UnsupportedFormatError
from .interfaces import IReportGenerator
from .models import Report
from .reports import ExcelReporter, WordReporter
from .utils import CurrencyFormat, DEFAULT_BASE_NAME, IDR, sanitize_filename

logger = logging.getLogger(__name__)


class ExportFormat(Enum):
    """Supported export formats, valued by file extension."""
    SPREADSHEET = "xlsx"
    DOCUMENT = "docx"
    
    @classmethod
    def parse(cls, value: Union[str, "ExportFormat"]) -> "ExportFormat":
        """Accept an ExportFormat, an extension ('xlsx', '.docx') or a member name."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lstrip(".").lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise UnsupportedFormatError(f"Unsupported export format: {value!r}")


@dataclass(frozen=True)
class ExportResult:
    """
    A finished export.
    
    Attributes:
        filename: Suggested file name, e.g. 'Proyek X.xlsx'
        data: Serialized file content
        mime_type: MIME type for download responses
        format: Format the data was produced in
    """
    filename: str
    data: bytes
    mime_type: str
    format: ExportFormat


def build_filename(title: str, fmt: Union[str, ExportFormat]) -> str:
    """
    Derive the download file name for a report title.
    
    Examples:
        >>> build_filename('', ExportFormat.SPREADSHEET)
        'RAB.xlsx'
        >>> build_filename('Proyek X', 'docx')
        'Proyek X.docx'
    """
    fmt = ExportFormat.parse(fmt)
    return f"{sanitize_filename(title, DEFAULT_BASE_NAME)}.{fmt.value}"


class ReportExporter:
    """
    Coordinator for report exports.
    
    Example:
        >>> exporter = ReportExporter()
        >>> result = exporter.build(report, ExportFormat.SPREADSHEET)
        >>> Path(result.filename).write_bytes(result.data)
    """
    
    def __init__(
        self,
        currency: CurrencyFormat = None,
        generators: Dict[ExportFormat, IReportGenerator] = None
    ):
        """
        Initialize the exporter.
        
        Args:
            currency: Currency display settings shared by all generators
            generators: Optional generator overrides per format
        """
        currency = currency or IDR
        self.generators: Dict[ExportFormat, IReportGenerator] = {
            ExportFormat.SPREADSHEET: ExcelReporter(currency),
            ExportFormat.DOCUMENT: WordReporter(currency),
        }
        if generators:
            self.generators.update(generators)
    
    def build(self, report: Report, fmt: Union[str, ExportFormat]) -> ExportResult:
        """
        Generate one artifact in memory.
        
        Args:
            report: Report snapshot
            fmt: Target format
            
        Returns:
            ExportResult with file name and content
            
        Raises:
            UnsupportedFormatError: Unknown format
            SerializationError: The generator could not encode the report
        """
        fmt = ExportFormat.parse(fmt)
        generator = self.generators[fmt]
        data = generator.generate(report)
        return ExportResult(
            filename=build_filename(report.metadata.title, fmt),
            data=data,
            mime_type=generator.mime_type,
            format=fmt,
        )
    
    def export(
        self,
        report: Report,
        fmt: Union[str, ExportFormat],
        directory: Union[str, Path] = "."
    ) -> Path:
        """
        Generate an artifact and write it into a directory.
        
        Nothing is written when generation fails.
        
        Returns:
            Path of the written file
        """
        result = self.build(report, fmt)
        return self.save(result, directory)
    
    @staticmethod
    def save(result: ExportResult, directory: Union[str, Path] = ".") -> Path:
        """Write an ExportResult into a directory and return the path."""
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / result.filename
        path.write_bytes(result.data)
        logger.info("Saved %s", path)
        return path
    
    async def build_async(self, report: Report, fmt: Union[str, ExportFormat]) -> ExportResult:
        """Run build() in a worker thread."""
        return await asyncio.to_thread(self.build, report, fmt)
    
    async def build_many(
        self,
        report: Report,
        formats: Iterable[Union[str, ExportFormat]]
    ) -> List[ExportResult]:
        """
        Build several formats concurrently from the same snapshot.
        
        Results are returned in the order the formats were requested.
        The first failure is raised to the caller.
        """
        return list(await asyncio.gather(
            *(self.build_async(report, fmt) for fmt in formats)
        ))


__all__ = [
    "ExportError",
    "ExportFormat",
    "ExportResult",
    "ReportExporter",
    "SerializationError",
    "UnsupportedFormatError",
    "build_filename",
]
