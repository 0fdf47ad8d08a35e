from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import IO, Any

import pandas as pd

"""Workbook reader: spreadsheet file -> raw table.

The reader only decodes. It returns every row of one sheet (header included)
as a list of cell lists, with missing cells as None and numpy scalars turned
into plain Python values. Mapping rows to Gates is record_builder's job.

The first sheet is used unless a sheet name is given.
"""

__all__ = [
    "WorkbookReadError",
    "list_sheet_names",
    "read_excel_table",
    "dataframe_to_table",
]

Source = Path | str | bytes | IO[bytes]


class WorkbookReadError(Exception):
    """Raised when the workbook cannot be opened or the sheet does not exist."""


def _open(source: Source) -> pd.ExcelFile:
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        return pd.ExcelFile(source)
    except FileNotFoundError as e:
        raise WorkbookReadError(f"workbook not found: {source}") from e
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        raise WorkbookReadError(f"cannot read workbook: {e}") from e


def list_sheet_names(source: Source) -> list[str]:
    with _open(source) as xls:
        return [str(n) for n in xls.sheet_names]


def dataframe_to_table(df: pd.DataFrame) -> list[list[Any]]:
    """Convert a header-less DataFrame into rows of plain Python cells (NaN -> None)."""
    obj = df.astype(object)
    obj = obj.where(pd.notna(obj), None)
    return obj.values.tolist()


def read_excel_table(
    source: Source,
    sheet_name: str | None = None,
    na_strings: list[str] | None = None,
) -> list[list[Any]]:
    """Read one sheet of a workbook as a raw table.

    Parameters
    ----------
    source: ファイルパス / 生バイト列 / バイナリファイルオブジェクト
    sheet_name: 対象シート (None なら先頭シート)
    na_strings: 空セル以外に欠損扱いする文字列 (例: ['-'])。既定は空セルのみ欠損
    """
    # pandas 既定の NA 文字列 ("N/A", "null", "None" 等) は実データとして残す
    na_values = [""] + list(na_strings or [])

    with _open(source) as xls:
        names = [str(n) for n in xls.sheet_names]
        if not names:
            raise WorkbookReadError("workbook has no sheets")
        target = names[0] if sheet_name is None else sheet_name
        if target not in names:
            raise WorkbookReadError(f"sheet '{target}' not found, available: {names}")
        # ヘッダなしで生読み (1行目ヘッダは record_builder 側で扱う)
        df = xls.parse(target, header=None, keep_default_na=False, na_values=na_values)
    return dataframe_to_table(df)
