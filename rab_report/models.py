"""
Data models for the RAB report generator.

This module contains the immutable snapshot handed to every generator:
report metadata, line items and the aggregates derived from them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .utils import (
    DEFAULT_BASE_NAME,
    UNSPECIFIED_CATEGORY,
    coerce_number,
    optional_number,
)


def _pick(data: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    """Return the first present key; accepts English and Indonesian field names."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _share(total: float, grand_total: float) -> float:
    """total / grand_total as a finite float, 0 when undefined."""
    if grand_total == 0:
        return 0.0
    return coerce_number(total / grand_total)


@dataclass(frozen=True)
class ReportMetadata:
    """
    Report header information.
    
    Attributes:
        title: Report name, also the base of the exported filename
        date: Report date as entered by the user (e.g. '2025-01-31')
    """
    title: str = ""
    date: str = ""
    
    @property
    def display_title(self) -> str:
        """Title with the default base name as fallback."""
        return self.title.strip() or DEFAULT_BASE_NAME
    
    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "date": self.date}
    
    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ReportMetadata":
        data = data or {}
        return cls(
            title=str(_pick(data, "title", "nama")),
            date=str(_pick(data, "date", "tanggal")),
        )


@dataclass(frozen=True)
class LineItem:
    """
    One row of the cost table.
    
    Attributes:
        sequence_label: User-supplied row number; blank means use position
        category: Cost category (e.g. 'Material', 'Upah')
        description: Free text description of the item
        quantity: Amount of units (None when left blank)
        unit: Unit name (e.g. 'm3', 'zak')
        unit_price: Price per unit (None when left blank)
    """
    sequence_label: str = ""
    category: str = ""
    description: str = ""
    quantity: Optional[float] = None
    unit: str = ""
    unit_price: Optional[float] = None
    
    @property
    def quantity_value(self) -> float:
        """Quantity with blanks and invalid values treated as 0."""
        return coerce_number(self.quantity)
    
    @property
    def unit_price_value(self) -> float:
        """Unit price with blanks and invalid values treated as 0."""
        return coerce_number(self.unit_price)
    
    @property
    def line_total(self) -> float:
        """Quantity times unit price, always recomputed; 0 if it overflows."""
        return coerce_number(self.quantity_value * self.unit_price_value)
    
    @property
    def category_key(self) -> str:
        """Category used for grouping; blank categories share one bucket."""
        return self.category.strip() or UNSPECIFIED_CATEGORY
    
    def label(self, position: int) -> str:
        """Sequence label, falling back to the 1-based position."""
        return self.sequence_label.strip() or str(position)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequence_label": self.sequence_label,
            "category": self.category,
            "description": self.description,
            "quantity": self.quantity,
            "unit": self.unit,
            "unit_price": self.unit_price,
        }
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LineItem":
        return cls(
            sequence_label=str(_pick(data, "sequence_label", "no")),
            category=str(_pick(data, "category", "kategori")),
            description=str(_pick(data, "description", "keterangan")),
            quantity=optional_number(_pick(data, "quantity", "jumlah", default=None)),
            unit=str(_pick(data, "unit", "satuan")),
            unit_price=optional_number(_pick(data, "unit_price", "harga", default=None)),
        )


@dataclass(frozen=True)
class Report:
    """
    Read-only snapshot of a report taken right before export.
    
    Item order is the user's row order and is preserved in every output.
    """
    metadata: ReportMetadata = field(default_factory=ReportMetadata)
    items: Tuple[LineItem, ...] = ()
    
    def __post_init__(self):
        # Lists handed in by callers are frozen into a tuple
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))
    
    @property
    def line_totals(self) -> List[float]:
        return [item.line_total for item in self.items]
    
    @property
    def grand_total(self) -> float:
        """Sum of every line item's quantity × unit price; 0 if it overflows."""
        return coerce_number(sum(self.line_totals))
    
    def labelled_items(self) -> Iterable[Tuple[str, LineItem]]:
        """Yield (label, item) pairs in row order."""
        for position, item in enumerate(self.items, 1):
            yield item.label(position), item
    
    def category_totals(self) -> Dict[str, float]:
        """
        Sum of line totals per category.
        
        Categories appear in order of first occurrence.
        """
        totals: Dict[str, float] = {}
        for item in self.items:
            key = item.category_key
            totals[key] = totals.get(key, 0.0) + item.line_total
        return {key: coerce_number(total) for key, total in totals.items()}
    
    def category_percentage(self, category: str) -> float:
        """Share of the grand total (0..1); 0 when the grand total is 0."""
        key = category.strip() or UNSPECIFIED_CATEGORY
        return _share(self.category_totals().get(key, 0.0), self.grand_total)
    
    def category_breakdown(self) -> List[Tuple[str, float, float]]:
        """List of (category, total, share) tuples."""
        grand_total = self.grand_total
        return [
            (category, total, _share(total, grand_total))
            for category, total in self.category_totals().items()
        ]
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Report":
        """
        Build a report from a plain dictionary.
        
        Accepts {"metadata": ..., "items": [...]} as well as the
        {"meta": ..., "rows": [...]} shape used by older saved reports.
        """
        metadata = ReportMetadata.from_dict(_pick(data, "metadata", "meta", default={}))
        rows = _pick(data, "items", "rows", default=[])
        return cls(metadata=metadata, items=tuple(LineItem.from_dict(row) for row in rows))
