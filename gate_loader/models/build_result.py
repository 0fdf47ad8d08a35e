from __future__ import annotations

from dataclasses import dataclass, field

from .diagnostic import ROW_PARSE_ERROR, Diagnostic
from .gate_record import GateRecord

"""Result models for a Gate build and its summary."""

__all__ = [
    "BuildResult",
    "SummaryReport",
]


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one build over a raw table.

    records keep the original row order minus dropped rows; diagnostics hold
    one entry per dropped row plus any table-level warnings.
    """
    records: tuple[GateRecord, ...]
    diagnostics: tuple[Diagnostic, ...] = ()
    data_rows: int = 0  # 入力データ行数 (ヘッダ除く)
    source: str = "<table>"

    @property
    def dropped_rows(self) -> list[int]:
        """Zero-based indexes of the data rows that were dropped."""
        return [d.row for d in self.diagnostics if d.error_type == ROW_PARSE_ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        """Table-level diagnostics (row count / column count checks)."""
        return [d for d in self.diagnostics if not d.is_row_level]

    @property
    def complete(self) -> bool:
        return len(self.records) == self.data_rows


@dataclass(frozen=True)
class SummaryReport:
    """Aggregate view of a built record set.

    group_counts always contains every group listed by the layout's
    summary_groups (1, 2, 3 by default), zero when a group is empty.
    status_counts sums to total; a missing status is counted as "Unknown".
    """
    total: int
    group_counts: dict[int, int] = field(default_factory=dict)
    status_counts: dict[str, int] = field(default_factory=dict)
    reverse_count: int = 0
