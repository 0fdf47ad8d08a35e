from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.diagnostic import Diagnostic

"""Diagnostic log buffering.

Build diagnostics are buffered in memory and flushed as JSON Lines to
`<log_dir>/errors-YYYYMMDD-HHMMSS.log` (UTC stamp fixed at first access).
Each line carries exactly the Diagnostic keys.
"""

__all__ = [
    "Diagnostic",
    "ErrorLogBuffer",
]

DEFAULT_LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for diagnostics. flush() appends JSON Lines to one file.

    シリアル実行前提 (スレッド安全性不要)
    """
    def __init__(self, log_dir: Path | str = DEFAULT_LOGS_DIR) -> None:
        self.log_dir = Path(log_dir)
        self._records: list[Diagnostic] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.log_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: Diagnostic) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[Diagnostic]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered diagnostics. Returns the log path, or None if nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
