"""Gate tracking workbook loader.

Reads the fixed 58-column Gate sheet into immutable GateRecord objects and
provides lookup / grouping / summary helpers over the built set.
"""

from .models.build_result import BuildResult, SummaryReport
from .models.diagnostic import Diagnostic
from .models.gate_record import GateRecord
from .models.layout import DEFAULT_LAYOUT, ColumnLayout
from .services.record_builder import (
    DataEmptyError,
    NotLoadedError,
    RecordBuilder,
    RowParseError,
    build_records,
    get_cell_value,
)

__all__ = [
    "BuildResult",
    "ColumnLayout",
    "DEFAULT_LAYOUT",
    "DataEmptyError",
    "Diagnostic",
    "GateRecord",
    "NotLoadedError",
    "RecordBuilder",
    "RowParseError",
    "SummaryReport",
    "build_records",
    "get_cell_value",
]
