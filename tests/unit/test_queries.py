from __future__ import annotations

from gate_loader.services.queries import (
    UNKNOWN_STATUS,
    filter_by_group,
    find_by_gate_id,
    summarize,
)
from gate_loader.services.record_builder import build_records


def _records(gate_table, rows=60, **kwargs):
    return build_records(gate_table(rows, **kwargs)).records


def test_find_by_gate_id(gate_table):
    records = _records(gate_table)
    found = find_by_gate_id(records, "G05")
    assert found is not None
    assert found.gate_id == "G05"
    assert found.row_index == 4
    assert find_by_gate_id(records, "G99") is None


def test_find_by_gate_id_returns_first_match(gate_table, gate_row):
    table = gate_table(2)
    dup = gate_row(3, gate_id="G01")
    table.append(dup)
    records = build_records(table).records
    assert find_by_gate_id(records, "G01").row_index == 0


def test_filter_by_group(gate_table):
    records = _records(gate_table)
    group2 = filter_by_group(records, 2)
    assert [r.gate_id for r in group2] == [f"G{n}" for n in range(21, 41)]
    assert filter_by_group(records, 4) == []


def test_filter_by_group_none_returns_everything(gate_table):
    records = _records(gate_table)
    assert filter_by_group(records) == list(records)
    assert filter_by_group(records, None) == list(records)


def test_filter_by_group_zero_is_a_real_group(gate_table, gate_row):
    table = gate_table(3)
    table.append(gate_row(4, gate_id="SPARE"))
    records = build_records(table).records
    assert [r.gate_id for r in filter_by_group(records, 0)] == ["SPARE"]


def test_summarize_counts(gate_table, gate_row):
    table = gate_table(0)
    for n in range(1, 61):
        status = ["S", "R", None][n % 3]
        rev = 1 if n % 10 == 0 else 0
        table.append(gate_row(n, status=status, rev=rev))
    records = build_records(table).records
    report = summarize(records)
    assert report.total == 60
    assert report.group_counts == {1: 20, 2: 20, 3: 20}
    assert report.status_counts == {"S": 20, "R": 20, UNKNOWN_STATUS: 20}
    assert sum(report.status_counts.values()) == report.total
    assert report.reverse_count == 6


def test_summarize_empty_set():
    report = summarize([])
    assert report.total == 0
    assert report.group_counts == {1: 0, 2: 0, 3: 0}
    assert report.status_counts == {}
    assert report.reverse_count == 0


def test_summarize_ignores_groups_outside_report(gate_table):
    records = _records(gate_table, 70)
    report = summarize(records)
    assert report.total == 70
    assert report.group_counts == {1: 20, 2: 20, 3: 20}
