#!/usr/bin/env python3
"""Sample workbook generator for the Gate loader.

Generates a Gate tracking workbook in the layout the loader expects:
- Row 1: Header row (58 columns)
- Row 2+: One data row per Gate (G01, G02, ...)

Useful for trying the CLI without the production spreadsheet:

    python scripts/gen_sample_workbook.py data/gates.xlsx
    python -m gate_loader.cli --file data/gates.xlsx
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

SCALAR_HEADER = [
    "mcn_no", "serial_no2", "rev_flag", "wo_dtl_id", "fo_desc", "sts",
    "working_rate", "start_dt", "end_dt", "plan_start_dt", "plan_end_dt",
    "work_st", "worker_id", "worker_nm", "skirt_qty", "proj_color", "cur_time",
]
JOINT_HEADER = [f"joint_{i}" for i in range(1, 21)]
SKIRT_HEADER = [f"skirt_{i}" for i in range(1, 21)]
HEADER = SCALAR_HEADER + JOINT_HEADER + ["plant"] + SKIRT_HEADER

STATUSES = ["S", "R", "H"]
SLOT_CODES = ["B", "W", "C", "E"]
PROCESSES = ["Welding", "Fitting", "Inspection", "Painting"]
COLORS = ["#4E79A7", "#F28E2B", "#59A14F", "#E15759"]


def generate_gate_rows(gates: int, seed: int = 42, reverse_ratio: float = 0.1) -> list[list[Any]]:
    """Generate one sheet row per Gate (header excluded)."""
    rng = np.random.default_rng(seed)
    base = pd.Timestamp("2024-01-01 08:00")
    rows: list[list[Any]] = []
    for n in range(1, gates + 1):
        start = base + pd.Timedelta(hours=int(rng.integers(0, 72)))
        end = start + pd.Timedelta(hours=int(rng.integers(1, 12)))
        scalar = [
            f"G{n:02d}",
            f"SEC-{(n - 1) // 10 + 1:02d}",
            int(rng.random() < reverse_ratio),
            f"WO{100000 + n}",
            str(rng.choice(PROCESSES)),
            str(rng.choice(STATUSES)),
            float(np.round(rng.uniform(0, 100), 1)),
            start.to_pydatetime(),
            end.to_pydatetime(),
            start.to_pydatetime(),
            end.to_pydatetime(),
            int(rng.integers(30, 480)),
            f"W{int(rng.integers(1000, 9999))}",
            f"Worker {n}",
            int(rng.integers(0, 20)),
            str(rng.choice(COLORS)),
            end.to_pydatetime(),
        ]
        joints = [str(c) for c in rng.choice(SLOT_CODES, 20)]
        skirts = [str(c) for c in rng.choice(SLOT_CODES, 20)]
        rows.append(scalar + joints + [f"P{(n - 1) // 20 + 1}"] + skirts)
    return rows


def create_workbook(output_path: Path, gates: int = 60, seed: int = 42, sheet: str = "Gates") -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    sheet_data = [HEADER] + generate_gate_rows(gates, seed)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(sheet_data).to_excel(writer, sheet_name=sheet, header=False, index=False)
    print(f"Created workbook: {output_path}")
    print(f"  Sheet: {sheet}")
    print(f"  Gates: {gates} (+ 1 header row)")
    print(f"  Columns: {len(HEADER)}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a sample Gate tracking workbook")
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--gates", type=int, default=60, help="Number of Gate rows (default: 60)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--sheet", default="Gates", help="Sheet name (default: Gates)")
    args = parser.parse_args()

    if args.gates <= 0:
        print("Error: --gates must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() != ".xlsx":
        print("Error: output must have .xlsx extension", file=sys.stderr)
        return 1

    try:
        create_workbook(args.output, args.gates, args.seed, args.sheet)
        return 0
    except Exception as e:
        print(f"Error creating workbook: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
