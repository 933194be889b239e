"""
Report generation modules for console, Excel and Word output.
"""

from .console import ConsoleReporter
from .excel import ExcelReporter
from .word import WordReporter

__all__ = [
    "ConsoleReporter",
    "ExcelReporter",
    "WordReporter",
]
