from __future__ import annotations

from datetime import datetime

from gate_loader.excel.reader import read_excel_table
from gate_loader.models.diagnostic import ROW_COUNT_MISMATCH
from gate_loader.services.record_builder import RecordBuilder
from tests.conftest import HEADER, make_gate_row

"""End-to-end: workbook on disk -> raw table -> GateRecords -> queries."""


def _sheet(rows: int) -> list[list[object]]:
    sheet = [list(HEADER)]
    for n in range(1, rows + 1):
        joints = [None if i % 4 == 0 else "W" for i in range(20)]
        skirts = ["B"] * 10 + [None] * 9 + ["C"]
        row = make_gate_row(
            n,
            rev=1 if n in (3, 25, 47) else 0,
            status=None if n == 60 else ("S" if n % 2 else "R"),
            joints=joints,
            skirts=skirts,
        )
        row[7] = datetime(2024, 3, 1, 8, 0)
        if n == 10:
            row[2] = None   # rev_flag blank
            row[14] = None  # skirt_qty blank
        sheet.append(row)
    return sheet


def test_load_sixty_gate_workbook(gate_workbook):
    path = gate_workbook(_sheet(60))
    builder = RecordBuilder()
    records = builder.build(read_excel_table(path), source=path.name)

    assert len(records) == 60
    assert builder.result.diagnostics == ()
    assert [r.row_index for r in records] == list(range(60))

    g10 = builder.find_by_gate_id("G10")
    assert g10.rev_flag == 0
    assert g10.skirt_qty == 0
    assert g10.start_time == datetime(2024, 3, 1, 8, 0)

    normal = builder.find_by_gate_id("G01")
    assert normal.joint_statuses[0] == "B"
    assert normal.joint_statuses[1] == "W"
    assert normal.skirt_statuses == ("B",) * 19 + ("C",)

    reversed_gate = builder.find_by_gate_id("G25")
    assert reversed_gate.is_reverse is True
    assert reversed_gate.group_index == 2
    assert reversed_gate.joint_statuses[0] is None
    assert list(reversed_gate.joint_statuses[1:]) == list(reversed(normal.joint_statuses[1:]))

    report = builder.summarize()
    assert report.total == 60
    assert report.group_counts == {1: 20, 2: 20, 3: 20}
    assert report.reverse_count == 3
    assert report.status_counts == {"S": 30, "R": 29, "Unknown": 1}


def test_load_workbook_with_fewer_rows(gate_workbook):
    path = gate_workbook(_sheet(55))
    builder = RecordBuilder()
    records = builder.build(read_excel_table(path), source=path.name)
    assert len(records) == 55
    warnings = builder.result.warnings
    assert [w.error_type for w in warnings] == [ROW_COUNT_MISMATCH]
    assert warnings[0].source == "gates.xlsx"
    assert builder.summarize().group_counts == {1: 20, 2: 20, 3: 15}
    assert len(builder.filter_by_group()) == 55


def test_load_workbook_with_short_trailing_row(gate_workbook):
    sheet = _sheet(60)
    # last row only fills the leading scalar block; pandas pads the rest
    sheet[-1] = sheet[-1][:17]
    path = gate_workbook(sheet)
    builder = RecordBuilder()
    records = builder.build(read_excel_table(path))
    assert len(records) == 60
    last = records[-1]
    assert last.joint_statuses == ("B",) * 20
    assert last.skirt_statuses == ("B",) * 20
    assert last.plant is None
