from __future__ import annotations

import logging
import numbers
import re
from collections.abc import Sequence
from datetime import date, time, timedelta
from typing import Any

from ..models.build_result import BuildResult, SummaryReport
from ..models.diagnostic import (
    COLUMN_COUNT_MISMATCH,
    ROW_COUNT_MISMATCH,
    ROW_PARSE_ERROR,
    Diagnostic,
)
from ..models.gate_record import GateRecord
from ..models.layout import DEFAULT_LAYOUT, ColumnLayout
from . import queries

"""Gate record construction.

Turns a decoded raw table (header row + one row per Gate) into GateRecord
objects:

1. Header row is checked for width and discarded
2. Each data row is mapped through the ColumnLayout
3. A row that cannot be mapped is dropped and reported as a Diagnostic;
   the remaining rows are still built

build_records() is a pure function. RecordBuilder keeps the latest BuildResult
for the query helpers and replaces it wholesale on every build.
"""

__all__ = [
    "BuildError",
    "DataEmptyError",
    "NotLoadedError",
    "RowParseError",
    "get_cell_value",
    "parse_gate_number",
    "compute_group_index",
    "apply_reverse_rule",
    "parse_gate_row",
    "build_records",
    "RecordBuilder",
]

logger = logging.getLogger(__name__)

RawTable = Sequence[Sequence[Any]]

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")

# 許容するセル型 (pandas 経由で得られる値)
_CELL_TYPES = (str, numbers.Real, date, time, timedelta)


class BuildError(Exception):
    """Base exception for Gate build errors."""


class DataEmptyError(BuildError):
    """Raised when the raw table has no data rows."""


class NotLoadedError(BuildError):
    """Raised when a query runs before any successful build."""


class RowParseError(BuildError):
    """Raised when a single data row cannot be mapped to a GateRecord."""

    def __init__(self, row_index: int, reason: str) -> None:
        super().__init__(f"row {row_index}: {reason}")
        self.row_index = row_index
        self.reason = reason


def get_cell_value(value: Any) -> Any:
    """Normalize a raw cell value.

    None, empty string and NaN/NaT become None. The blank sentinel "B" and any
    other value are returned unchanged (type preserved).
    """
    if value is None:
        return None
    if isinstance(value, str):
        return None if value == "" else value
    # NaN (float) / NaT (pandas) は自分自身と等しくならない
    try:
        if value != value:
            return None
    except (TypeError, ValueError):
        return value
    return value


def _cell(row: Sequence[Any], offset: int) -> Any:
    # 末尾欠落セルは None 扱い
    if offset >= len(row):
        return None
    return get_cell_value(row[offset])


def _as_int_if_integral(value: Any) -> Any:
    # pandas は NaN を含む整数列を float で返す (1.0 -> 1)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _is_reverse_flag(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and value == 1


def parse_gate_number(gate_id: Any, prefix: str = "G") -> int:
    """Numeric suffix of a gate id ("G05" -> 5). Missing or unparseable -> 0."""
    if gate_id is None:
        return 0
    text = str(gate_id).strip()
    if prefix and text.startswith(prefix):
        text = text[len(prefix):]
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    try:
        return int(match.group())
    except ValueError:
        # int の桁数上限 (sys.set_int_max_str_digits) 超過
        return 0


def compute_group_index(gate_id: Any, layout: ColumnLayout = DEFAULT_LAYOUT) -> int:
    """1-based group band of a gate: ceil(number / group_size). Never negative."""
    number = parse_gate_number(gate_id, layout.gate_prefix)
    # 整数除算 (巨大な番号でも float に変換しない)
    return max(0, -(-number // layout.group_size))


def apply_reverse_rule(joint_statuses: Sequence[Any], layout: ColumnLayout = DEFAULT_LAYOUT) -> list[Any]:
    """Reverse the joint slots of a reversed Gate.

    The anchor slot (slot 0, there is no physical "Joint 1") is excluded from
    the reversal and set to None; the remaining slots are reversed in place
    around it. With the default layout: [a, b, c, ..., t] -> [None, t, ..., c, b].
    """
    if len(joint_statuses) != layout.slot_count:
        raise ValueError(
            f"expected {layout.slot_count} joint slots, got {len(joint_statuses)}"
        )
    anchor = layout.reverse_anchor
    tail = [s for i, s in enumerate(joint_statuses) if i != anchor]
    tail.reverse()
    return tail[:anchor] + [None] + tail[anchor:]


def _check_cell_types(row: Sequence[Any], row_index: int, layout: ColumnLayout) -> None:
    for offset, value in enumerate(row):
        if value is None or isinstance(value, _CELL_TYPES):
            continue
        name = layout.field_for_offset(offset) or f"column {offset}"
        raise RowParseError(
            row_index, f"unsupported cell type {type(value).__name__} in {name}"
        )


def parse_gate_row(row: Any, row_index: int, layout: ColumnLayout = DEFAULT_LAYOUT) -> GateRecord:
    """Map one data row to a GateRecord.

    Raises:
        RowParseError: If the row is not a sequence, is shorter than the leading
            scalar block, or holds a cell of an unsupported type
    """
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise RowParseError(row_index, f"expected a sequence of cells, got {type(row).__name__}")
    if len(row) < layout.min_row_length:
        raise RowParseError(
            row_index, f"row has {len(row)} cells, expected at least {layout.min_row_length}"
        )
    _check_cell_types(row, row_index, layout)

    scalars: dict[str, Any] = {}
    for name, offset in layout.scalar_offsets.items():
        value = _cell(row, offset)
        if value is None and name in layout.zero_defaults:
            value = 0
        scalars[name] = value
    for name in layout.zero_defaults:
        scalars[name] = _as_int_if_integral(scalars[name])

    joints = [_default_blank(_cell(row, i), layout) for i in layout.joint_columns]
    skirts = [_default_blank(_cell(row, i), layout) for i in layout.skirt_columns]

    gate_number = parse_gate_number(scalars["gate_id"], layout.gate_prefix)
    group_index = compute_group_index(scalars["gate_id"], layout)

    is_reverse = _is_reverse_flag(scalars["rev_flag"])
    if is_reverse:
        joints = apply_reverse_rule(joints, layout)

    return GateRecord(
        **scalars,
        gate_number=gate_number,
        group_index=group_index,
        joint_statuses=tuple(joints),
        skirt_statuses=tuple(skirts),
        row_index=row_index,
        is_reverse=is_reverse,
    )


def _default_blank(value: Any, layout: ColumnLayout) -> Any:
    return layout.blank if value is None else value


def _validate_table(table: RawTable, layout: ColumnLayout, source: str) -> list[Diagnostic]:
    if table is None or len(table) == 0:
        raise DataEmptyError("table is empty")
    data_rows = len(table) - 1
    if data_rows == 0:
        raise DataEmptyError("table has a header row but no data rows")

    warnings: list[Diagnostic] = []
    header = table[0]
    width = len(header) if isinstance(header, Sequence) else 0
    logger.debug(f"header (first 10): {list(header)[:10] if width else header}")
    if width != layout.header_width:
        msg = f"expected {layout.header_width} columns but header has {width}"
        logger.warning(msg)
        warnings.append(Diagnostic.create(source, -1, COLUMN_COUNT_MISMATCH, msg))
    if data_rows != layout.expected_data_rows:
        msg = f"expected {layout.expected_data_rows} gates but table has {data_rows} data rows"
        logger.warning(msg)
        warnings.append(Diagnostic.create(source, -1, ROW_COUNT_MISMATCH, msg))
    return warnings


def build_records(
    table: RawTable,
    layout: ColumnLayout = DEFAULT_LAYOUT,
    *,
    source: str = "<table>",
) -> BuildResult:
    """Build GateRecords from a raw table.

    Args:
        table: Decoded sheet rows; row 0 is the header
        layout: Column layout of the sheet
        source: Name used in diagnostics (usually the workbook file name)

    Returns:
        BuildResult with records in original row order and a diagnostic per
        dropped row / failed table check

    Raises:
        DataEmptyError: If the table has no rows or only a header row
    """
    diagnostics = _validate_table(table, layout, source)

    records: list[GateRecord] = []
    for index, row in enumerate(table[1:]):
        try:
            record = parse_gate_row(row, index, layout)
        except RowParseError as e:
            logger.error(f"gate row {index + 1} dropped: {e.reason}")
            diagnostics.append(Diagnostic.create(source, index, ROW_PARSE_ERROR, e.reason))
            continue
        except (TypeError, ValueError, KeyError, IndexError, ArithmeticError) as e:
            logger.error(f"gate row {index + 1} dropped: {e}")
            diagnostics.append(Diagnostic.create(source, index, ROW_PARSE_ERROR, str(e)))
            continue
        if index < 3:
            logger.debug(
                f"gate {record.gate_id} parsed: section={record.section_id} "
                f"process={record.current_process} status={record.status} "
                f"group={record.group_index} skirt_qty={record.skirt_qty} "
                f"rev={'Reverse' if record.is_reverse else 'Normal'} "
                f"joints={record.active_joint_count} skirts={record.active_skirt_count}"
            )
        records.append(record)

    data_rows = len(table) - 1
    logger.info(f"parsed {len(records)}/{data_rows} gates from {source}")
    return BuildResult(
        records=tuple(records),
        diagnostics=tuple(diagnostics),
        data_rows=data_rows,
        source=source,
    )


class RecordBuilder:
    """Caller-owned holder of the latest Gate build.

    Each build() replaces the previous result wholesale. Queries raise
    NotLoadedError until a build has succeeded. Not safe for overlapping
    builds; use build_records() directly for independent parses.
    """

    def __init__(self, layout: ColumnLayout = DEFAULT_LAYOUT) -> None:
        self.layout = layout
        self._result: BuildResult | None = None

    @property
    def is_loaded(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> BuildResult:
        return self._require_loaded()

    @property
    def records(self) -> list[GateRecord]:
        return list(self._require_loaded().records)

    def build(self, table: RawTable, *, source: str = "<table>") -> list[GateRecord]:
        """Build records from table and make them the current result.

        A failed build (DataEmptyError) leaves the previous result in place.
        """
        self._result = build_records(table, self.layout, source=source)
        return list(self._result.records)

    def find_by_gate_id(self, gate_id: Any) -> GateRecord | None:
        return queries.find_by_gate_id(self._require_loaded().records, gate_id)

    def filter_by_group(self, group_index: int | None = None) -> list[GateRecord]:
        return queries.filter_by_group(self._require_loaded().records, group_index)

    def summarize(self) -> SummaryReport:
        return queries.summarize(self._require_loaded().records, self.layout.summary_groups)

    def _require_loaded(self) -> BuildResult:
        if self._result is None:
            raise NotLoadedError("no gate data loaded; call build() first")
        return self._result
