"""
Interface definitions (Protocols) for the RAB report generator.

This module defines abstract interfaces that keep the export core
independent of the front end and of the storage used for saved reports.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Protocol, Tuple, Type, runtime_checkable

from .exceptions import SerializationError
from .models import Report, ReportMetadata
from .utils import CurrencyFormat, IDR

logger = logging.getLogger(__name__)


@runtime_checkable
class IReportGenerator(Protocol):
    """
    Interface for artifact generators.
    
    A generator turns one Report snapshot into the bytes of a single
    file (workbook, document, ...).
    """
    
    extension: str
    mime_type: str
    
    def generate(self, report: Report) -> bytes:
        """
        Generate the artifact for a report.
        
        Args:
            report: Report snapshot; must not be modified
            
        Returns:
            Serialized file content
        """
        ...


@runtime_checkable
class IReportRepository(Protocol):
    """
    Interface for saved-report storage used by the front ends.
    """
    
    def save(self, report: Report) -> int:
        """Store a report and return its id."""
        ...
    
    def list(self) -> List[Tuple[int, ReportMetadata]]:
        """Return (id, metadata) pairs, newest first."""
        ...
    
    def load(self, report_id: int) -> Report:
        """Load a stored report; raises KeyError if unknown."""
        ...


class BaseGenerator(ABC):
    """
    Abstract base class for artifact generators.
    
    Subclasses implement _render(); generate() turns the library errors
    listed in serialization_errors into SerializationError.
    """
    
    extension: str = ""
    mime_type: str = ""
    format_name: str = ""
    serialization_errors: Tuple[Type[BaseException], ...] = (ValueError,)
    
    def __init__(self, currency: CurrencyFormat = None):
        """
        Initialize the generator.
        
        Args:
            currency: Currency display settings. Defaults to Rupiah.
        """
        self.currency = currency or IDR
    
    def generate(self, report: Report) -> bytes:
        """Render the report and return the serialized artifact."""
        try:
            data = self._render(report)
        except self.serialization_errors as exc:
            logger.error("Failed to build %s for '%s': %s",
                         self.format_name, report.metadata.display_title, exc)
            raise SerializationError(self.format_name, str(exc)) from exc
        logger.info("Generated %s (%d items, %d bytes)",
                    self.format_name, len(report.items), len(data))
        return data
    
    @abstractmethod
    def _render(self, report: Report) -> bytes:
        """Build and serialize the artifact."""
        pass
