"""
JSON reports about the typing quality of a document.
"""

from __future__ import annotations

from .missing_definitions import create_missing_definitions_report, render_report
from .slots import TypeSlot, collect_type_slots, coverage_percentage
from .type_coverage import create_type_coverage_report

__all__ = [
    "TypeSlot",
    "collect_type_slots",
    "coverage_percentage",
    "create_missing_definitions_report",
    "create_type_coverage_report",
    "render_report",
]
