"""Domain models for the Gate loader."""

from .build_result import BuildResult, SummaryReport
from .diagnostic import Diagnostic
from .gate_record import GateRecord
from .layout import DEFAULT_LAYOUT, ColumnLayout, LayoutError

__all__ = [
    # Layout
    "ColumnLayout",
    "DEFAULT_LAYOUT",
    "LayoutError",
    # Records
    "GateRecord",
    "BuildResult",
    "SummaryReport",
    "Diagnostic",
]
