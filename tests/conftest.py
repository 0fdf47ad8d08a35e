# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any, Callable

import pandas as pd
import pytest

HEADER = [f"col_{i}" for i in range(58)]


def make_gate_row(
    n: int,
    *,
    rev: Any = 0,
    status: Any = "S",
    joints: list[Any] | None = None,
    skirts: list[Any] | None = None,
    gate_id: Any = None,
) -> list[Any]:
    """Build one 58-cell Gate row."""
    if joints is None:
        joints = [f"J{i}" for i in range(1, 21)]
    if skirts is None:
        skirts = [f"K{i}" for i in range(1, 21)]
    scalar = [
        f"G{n:02d}" if gate_id is None else gate_id,  # gate_id
        "SEC-01",            # section_id
        rev,                 # rev_flag
        f"WO{100000 + n}",   # work_order_id
        "Welding",           # current_process
        status,              # status
        42.5,                # working_rate_pct
        "2024-01-01 08:00",  # start_time
        "2024-01-01 17:00",  # end_time
        "2024-01-01 08:00",  # planned_start_time
        "2024-01-01 16:00",  # planned_end_time
        120,                 # standard_time
        "W1001",             # worker_id
        "Kim",               # worker_name
        3,                   # skirt_qty
        "#4E79A7",           # project_color
        "2024-01-01 12:00",  # current_time
    ]
    return scalar + list(joints) + ["P1"] + list(skirts)


def make_table(rows: int, **kwargs: Any) -> list[list[Any]]:
    return [list(HEADER)] + [make_gate_row(n, **kwargs) for n in range(1, rows + 1)]


@pytest.fixture()
def gate_row() -> Callable[..., list[Any]]:
    return make_gate_row


@pytest.fixture()
def gate_table() -> Callable[..., list[list[Any]]]:
    return make_table


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_file: ./data/gates.xlsx
sheet_name: null
expected_data_rows: 60
na_strings: []
error_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "gate_loader.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def write_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def gate_workbook(temp_workdir: Path) -> Callable[..., Path]:
    def _make(rows: list[list[Any]], name: str = "gates.xlsx", sheet: str = "Gates") -> Path:
        return write_workbook(temp_workdir / "data" / name, {sheet: rows})
    return _make
