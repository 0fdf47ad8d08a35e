from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..models.build_result import SummaryReport
from ..models.gate_record import GateRecord

"""Query helpers over a built Gate record set.

Plain functions over a record sequence; RecordBuilder delegates to these after
checking that a build has happened.
"""

__all__ = [
    "find_by_gate_id",
    "filter_by_group",
    "summarize",
    "UNKNOWN_STATUS",
]

UNKNOWN_STATUS = "Unknown"


def find_by_gate_id(records: Iterable[GateRecord], gate_id: Any) -> GateRecord | None:
    """First record whose gate_id equals gate_id, or None."""
    for record in records:
        if record.gate_id == gate_id:
            return record
    return None


def filter_by_group(records: Sequence[GateRecord], group_index: int | None = None) -> list[GateRecord]:
    """Records in the given group band. group_index=None returns every record.

    Group 0 (gates without a usable number) is a real group and is filtered
    like any other.
    """
    if group_index is None:
        return list(records)
    return [r for r in records if r.group_index == group_index]


def summarize(records: Sequence[GateRecord], groups: Iterable[int] = (1, 2, 3)) -> SummaryReport:
    """Aggregate counts: total, per group, per status and reversed Gates."""
    group_counts = {g: 0 for g in groups}
    status_counts: dict[str, int] = {}
    reverse_count = 0
    for record in records:
        if record.group_index in group_counts:
            group_counts[record.group_index] += 1
        status = UNKNOWN_STATUS if record.status is None else str(record.status)
        status_counts[status] = status_counts.get(status, 0) + 1
        if record.is_reverse:
            reverse_count += 1
    return SummaryReport(
        total=len(records),
        group_counts=group_counts,
        status_counts=status_counts,
        reverse_count=reverse_count,
    )
