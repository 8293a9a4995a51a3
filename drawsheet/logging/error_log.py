from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Per-run error log for blocked imports.

Each workbook that fails detection leaves one ErrorRecord. The run collects
them and writes a single JSON Lines file under ``logs/`` once every file has
been tried; a clean run writes nothing.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "error_log_name",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


def error_log_name(started: datetime) -> str:
    """``errors-YYYYMMDD-HHMMSS.log`` for a run started at ``started`` (UTC)."""
    return f"errors-{started.astimezone(UTC).strftime(TIMESTAMP_FMT)}.log"


class ErrorLogBuffer:
    """Blocked-import records collected over one run.

    The log file is named after the moment the buffer is created, so repeated
    flushes within a run append to the same file.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._pending: list[ErrorRecord] = []
        self._path = (logs_dir or LOGS_DIR) / error_log_name(datetime.now(UTC))

    @property
    def file_path(self) -> Path:
        return self._path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._pending)

    def failures_by_type(self) -> Counter[str]:
        """Pending records counted by error type (e.g. ``COLUMN_MAPPING_ERROR``)."""
        return Counter(r.error_type for r in self._pending)

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path:
        if self._pending:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            lines = "".join(f"{r.to_json_line()}\n" for r in self._pending)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(lines)
            self._pending.clear()
        return self._path
