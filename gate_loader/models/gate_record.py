from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, time, timedelta
from typing import Any

"""GateRecord domain model.

A GateRecord is the typed form of one data row of the Gate tracking workbook.
Records are frozen; status blocks are stored as tuples so a built record set
cannot be mutated after construction.
"""

__all__ = [
    "GateRecord",
]


def _json_safe(value: Any) -> Any:
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


@dataclass(frozen=True)
class GateRecord:
    """One Gate (one sheet row) after normalization.

    joint_statuses / skirt_statuses always hold exactly 20 slots. Empty slots
    carry the blank sentinel "B"; the only None slot is joint slot 0 of a
    reversed Gate.
    """
    # identity
    gate_id: Any
    section_id: Any
    rev_flag: Any  # 0=Normal, 1=Reverse
    # work metadata
    work_order_id: Any
    current_process: Any
    status: Any  # S/R/H ...
    working_rate_pct: Any
    start_time: Any
    end_time: Any
    planned_start_time: Any
    planned_end_time: Any
    standard_time: Any
    worker_id: Any
    worker_name: Any
    skirt_qty: Any
    project_color: Any
    current_time: Any
    plant: Any
    # derived
    gate_number: int
    group_index: int
    # status blocks
    joint_statuses: tuple[Any, ...]
    skirt_statuses: tuple[Any, ...]
    # meta
    row_index: int
    is_reverse: bool

    @property
    def active_joint_count(self) -> int:
        """Joint slots holding a real status code."""
        return sum(1 for s in self.joint_statuses if s is not None and s != "B")

    @property
    def active_skirt_count(self) -> int:
        """Skirt slots holding a real status code."""
        return sum(1 for s in self.skirt_statuses if s is not None and s != "B")

    def to_dict(self) -> dict[str, Any]:
        """Plain dict (lists instead of tuples, ISO strings for dates) for JSON output."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = [_json_safe(v) for v in value]
            else:
                data[key] = _json_safe(value)
        return data
