"""
Pytest configuration and shared fixtures.
"""

import sys
import os

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rab_report.models import LineItem, Report, ReportMetadata


@pytest.fixture
def sample_metadata():
    """Common report metadata for tests."""
    return ReportMetadata(title="Proyek X", date="2025-01-31")


@pytest.fixture
def sample_items():
    """Three items: two Material, one Upah; totals 100, 50, 25."""
    return [
        LineItem(sequence_label="1", category="Material", description="Semen",
                 quantity=10, unit="zak", unit_price=10),
        LineItem(sequence_label="2", category="Material", description="Pasir",
                 quantity=5, unit="m3", unit_price=10),
        LineItem(sequence_label="", category="Upah", description="Tukang",
                 quantity=1, unit="hari", unit_price=25),
    ]


@pytest.fixture
def sample_report(sample_metadata, sample_items):
    """Report built from the sample metadata and items."""
    return Report(metadata=sample_metadata, items=sample_items)


@pytest.fixture
def empty_report(sample_metadata):
    """Report without line items."""
    return Report(metadata=sample_metadata, items=[])
