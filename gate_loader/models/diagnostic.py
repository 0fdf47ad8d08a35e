from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""Diagnostic model for non-fatal build problems.

A Diagnostic is recorded for every row dropped during a build and for every
table-level sanity check that failed (row count, header width). row=-1 is the
sentinel for table-level problems where no specific data row applies.

error_type values:
    ROW_PARSE_ERROR        a data row could not be mapped to a GateRecord
    ROW_COUNT_MISMATCH     data row count differs from the expected Gate count
    COLUMN_COUNT_MISMATCH  header width differs from the expected column count
"""

__all__ = [
    "Diagnostic",
    "ROW_PARSE_ERROR",
    "ROW_COUNT_MISMATCH",
    "COLUMN_COUNT_MISMATCH",
]

ROW_PARSE_ERROR = "ROW_PARSE_ERROR"
ROW_COUNT_MISMATCH = "ROW_COUNT_MISMATCH"
COLUMN_COUNT_MISMATCH = "COLUMN_COUNT_MISMATCH"


@dataclass(frozen=True)
class Diagnostic:
    """Structured diagnostic for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Workbook name (or "<table>" for in-memory tables)
        row: Zero-based data row index. -1 for table-level problems
        error_type: Classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str
    source: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(source: str, row: int, error_type: str, message: str) -> Diagnostic:
        """Create a new Diagnostic stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return Diagnostic(
            timestamp=ts,
            source=source,
            row=row,
            error_type=error_type,
            message=message,
        )

    @property
    def is_row_level(self) -> bool:
        return self.row >= 0

    def to_json_line(self) -> str:
        # dataclass -> dict のみ (追加キーなし)
        return json.dumps(asdict(self), ensure_ascii=False)
