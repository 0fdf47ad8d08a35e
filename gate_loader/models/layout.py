from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

"""Column layout model for the Gate tracking workbook.

The workbook is a fixed 58 column sheet (A..BF) with one header row followed by
one data row per Gate. Instead of scattering numeric offsets through the
extraction loop, every position is declared once here and validated when the
layout is constructed.

Sheet layout (0-based offsets):

    0-16   scalar Gate fields (gate_id .. current_time)
    17-36  joint statuses (20 slots)
    37     plant
    38-57  skirt statuses (20 slots)
"""

__all__ = [
    "ColumnLayout",
    "LayoutError",
    "DEFAULT_LAYOUT",
    "DEFAULT_SCALAR_OFFSETS",
]


class LayoutError(ValueError):
    """Raised when a ColumnLayout is internally inconsistent."""


# field name -> column offset
DEFAULT_SCALAR_OFFSETS: Mapping[str, int] = MappingProxyType({
    "gate_id": 0,             # A
    "section_id": 1,          # B
    "rev_flag": 2,            # C (0=Normal, 1=Reverse)
    "work_order_id": 3,       # D
    "current_process": 4,     # E
    "status": 5,              # F
    "working_rate_pct": 6,    # G
    "start_time": 7,          # H
    "end_time": 8,            # I
    "planned_start_time": 9,  # J
    "planned_end_time": 10,   # K
    "standard_time": 11,      # L
    "worker_id": 12,          # M
    "worker_name": 13,        # N
    "skirt_qty": 14,          # O
    "project_color": 15,      # P
    "current_time": 16,       # Q
    "plant": 37,              # AL
})


@dataclass(frozen=True)
class ColumnLayout:
    """Declarative description of the Gate sheet.

    Attributes:
        scalar_offsets: Field name -> column offset for every single-cell field
        joint_start: First column of the joint status block
        skirt_start: First column of the skirt status block
        slot_count: Number of slots in each status block
        zero_defaults: Scalar fields that default to 0 instead of None
        header_width: Expected number of header columns
        expected_data_rows: Expected number of data rows (one per Gate)
        group_size: Gates per group band (group_index = ceil(n / group_size))
        summary_groups: Groups reported individually by summarize()
        reverse_anchor: Joint slot excluded from reversal (becomes None)
        blank: Sentinel for an empty status slot
        gate_prefix: Prefix stripped from gate_id before parsing its number
    """
    scalar_offsets: Mapping[str, int] = field(default_factory=lambda: DEFAULT_SCALAR_OFFSETS)
    joint_start: int = 17
    skirt_start: int = 38
    slot_count: int = 20
    zero_defaults: frozenset[str] = frozenset({"rev_flag", "skirt_qty"})
    header_width: int = 58
    expected_data_rows: int = 60
    group_size: int = 20
    summary_groups: tuple[int, ...] = (1, 2, 3)
    reverse_anchor: int = 0
    blank: str = "B"
    gate_prefix: str = "G"

    def __post_init__(self) -> None:
        # 呼び出し側の dict を後から変更されても影響しないよう読み取り専用コピーに置換
        object.__setattr__(self, "scalar_offsets", MappingProxyType(dict(self.scalar_offsets)))
        object.__setattr__(self, "zero_defaults", frozenset(self.zero_defaults))
        if self.slot_count <= 0:
            raise LayoutError("slot_count must be positive")
        if self.group_size <= 0:
            raise LayoutError("group_size must be positive")
        missing = set(DEFAULT_SCALAR_OFFSETS) - set(self.scalar_offsets)
        extra = set(self.scalar_offsets) - set(DEFAULT_SCALAR_OFFSETS)
        if missing or extra:
            raise LayoutError(
                f"scalar fields mismatch: missing={sorted(missing)} unknown={sorted(extra)}"
            )
        unknown = self.zero_defaults - set(self.scalar_offsets)
        if unknown:
            raise LayoutError(f"zero_defaults reference unknown fields: {sorted(unknown)}")
        if not 0 <= self.reverse_anchor < self.slot_count:
            raise LayoutError(
                f"reverse_anchor {self.reverse_anchor} outside joint block of {self.slot_count} slots"
            )

        # 列の重複チェック
        seen: dict[int, str] = {}
        for name, offset in self.scalar_offsets.items():
            if offset < 0:
                raise LayoutError(f"negative offset for {name}: {offset}")
            if offset in seen:
                raise LayoutError(f"offset {offset} used by both {seen[offset]} and {name}")
            seen[offset] = name
        for block, cols in (("joint", self.joint_columns), ("skirt", self.skirt_columns)):
            for offset in cols:
                if offset in seen:
                    raise LayoutError(f"{block} block overlaps {seen[offset]} at offset {offset}")
                seen[offset] = block
        if max(seen) >= self.header_width:
            raise LayoutError(f"layout needs {max(seen) + 1} columns, header_width is {self.header_width}")

    @property
    def joint_columns(self) -> range:
        return range(self.joint_start, self.joint_start + self.slot_count)

    @property
    def skirt_columns(self) -> range:
        return range(self.skirt_start, self.skirt_start + self.slot_count)

    @property
    def min_row_length(self) -> int:
        """Shortest row accepted: the leading block of scalar fields must be present."""
        leading = [o for o in self.scalar_offsets.values() if o < self.joint_start]
        return max(leading) + 1

    def field_for_offset(self, offset: int) -> str | None:
        """Return the field name stored at offset (joint/skirt blocks report their block name)."""
        for name, o in self.scalar_offsets.items():
            if o == offset:
                return name
        if offset in self.joint_columns:
            return f"joint_{offset - self.joint_start + 1}"
        if offset in self.skirt_columns:
            return f"skirt_{offset - self.skirt_start + 1}"
        return None


DEFAULT_LAYOUT = ColumnLayout()
