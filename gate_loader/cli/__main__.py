from __future__ import annotations

import argparse
import dataclasses
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from gate_loader.config.loader import DEFAULT_CONFIG_PATH, ConfigError, LoaderConfig, load_config
from gate_loader.excel.reader import WorkbookReadError, read_excel_table
from gate_loader.logging.error_log import ErrorLogBuffer
from gate_loader.logging.init import log_summary, setup_logging
from gate_loader.models.layout import DEFAULT_LAYOUT
from gate_loader.services.record_builder import DataEmptyError, RecordBuilder
from gate_loader.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (--config > GATE_LOADER_CONFIG > config/gate_loader.yml)
- Read the Gate workbook into a raw table
- Build GateRecords, flush diagnostics to the error log
- Print the requested query output and the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV_VAR = "GATE_LOADER_CONFIG"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Gate tracking workbook loader")
    p.add_argument("--config", type=Path, default=None, help="Path to YAML config")
    p.add_argument("--file", type=Path, default=None, help="Workbook to load (overrides source_file)")
    p.add_argument("--sheet", default=None, help="Sheet name (default: first sheet)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print header & first rows then exit")
    p.add_argument("--gate", default=None, help="Print one Gate record as JSON (e.g. G05)")
    p.add_argument("--group", type=int, default=None, help="Print gate ids of one group")
    p.add_argument("--json", action="store_true", help="Dump all Gate records as JSON")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> LoaderConfig:
    env_path = os.getenv(CONFIG_ENV_VAR)
    config_path = args.config or (Path(env_path) if env_path else DEFAULT_CONFIG_PATH)
    if args.file is not None and args.config is None and not config_path.exists():
        # --file 単独指定時は設定ファイル無しで既定値を使用
        cfg = LoaderConfig(source_file=str(args.file))
    else:
        cfg = load_config(config_path)
    if args.file is not None:
        cfg = dataclasses.replace(cfg, source_file=str(args.file))
    if args.sheet is not None:
        cfg = dataclasses.replace(cfg, sheet_name=args.sheet)
    return cfg


def _inspect_data(table: list[list[object]]) -> int:
    if not table:
        print("inspect: sheet is empty")
        return EXIT_SUCCESS_ALL
    header = table[0]
    print(f"HEADER: cols={len(header)} first10={header[:10]}")
    print(f"DATA ROWS: {len(table) - 1}")
    for i, row in enumerate(table[1:4]):
        # datetime 含む場合 JSON 化失敗するため isoformat で fallback
        safe = [v.isoformat() if hasattr(v, "isoformat") else v for v in row[:10]]
        print(f"  row {i}: {safe}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    source = Path(cfg.source_file)
    logger.info(f"Loading gates from: {source}")
    try:
        table = read_excel_table(source, cfg.sheet_name, na_strings=cfg.na_strings or None)
    except WorkbookReadError as e:
        logger.error(f"read: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(table)

    layout = dataclasses.replace(DEFAULT_LAYOUT, expected_data_rows=cfg.expected_data_rows)
    builder = RecordBuilder(layout)
    try:
        builder.build(table, source=source.name)
    except DataEmptyError as e:
        logger.error(f"build: {e}")
        return EXIT_FATAL
    result = builder.result

    if result.diagnostics:
        error_log = ErrorLogBuffer(cfg.error_log_dir)
        error_log.extend(result.diagnostics)
        log_path = error_log.flush()
        logger.info(f"{len(result.diagnostics)} diagnostics written to {log_path}")

    if args.gate is not None:
        record = builder.find_by_gate_id(args.gate)
        if record is None:
            logger.warning(f"gate not found: {args.gate}")
        else:
            print(json.dumps(record.to_dict(), ensure_ascii=False, default=str))
    if args.group is not None:
        ids = [str(r.gate_id) for r in builder.filter_by_group(args.group)]
        print(f"group {args.group}: {' '.join(ids) if ids else '-'}")
    if args.json:
        print(json.dumps([r.to_dict() for r in builder.records], ensure_ascii=False, default=str))

    summary_line = render_summary_line(builder.summarize(), result)
    # log_summary が "SUMMARY " を付与するため先頭を除去
    log_summary(summary_line[len("SUMMARY "):])

    if result.dropped_rows:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
