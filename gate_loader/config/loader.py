from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the YAML config (config/gate_loader.yml by default)
- Validate it against the packaged config_schema.json
- Apply defaults for optional keys
"""

__all__ = [
    "ConfigError",
    "LoaderConfig",
    "load_config",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
]

DEFAULT_CONFIG_PATH = Path("config/gate_loader.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class LoaderConfig:
    source_file: str
    sheet_name: str | None = None  # None なら先頭シート
    expected_data_rows: int = 60
    na_strings: list[str] = field(default_factory=list)  # 空セル以外の欠損文字列
    error_log_dir: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            data violates it (missing keys, wrong types, unknown keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> LoaderConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    return LoaderConfig(
        source_file=data["source_file"],
        sheet_name=data.get("sheet_name"),
        expected_data_rows=data.get("expected_data_rows", 60),
        na_strings=list(data.get("na_strings", [])),
        error_log_dir=data.get("error_log_dir", "./logs"),
    )
