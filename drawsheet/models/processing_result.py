from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .column_export import ImportStats
from .column_mapping import ColumnMapping
from .grid import SpreadsheetData
from .row_analysis import RowBoundaries

"""Processing result models for drawsheet.

SheetDetection is what the heuristics produce for one sheet; FileDetection
wraps it with file-level status; ProcessingResult aggregates a whole run for
the SUMMARY line.
"""

__all__ = [
    "FileStatus",
    "SheetDetection",
    "FileDetection",
    "ProcessingResult",
]


class FileStatus(Enum):
    """Status of one file in a run.

    - SUCCESS: mapping and row range detected, both columns assigned
    - FAILED: the file could not be read or a required column is unmapped
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SheetDetection:
    """Detected column mapping, row boundaries and stats for one sheet."""
    sheet_name: str
    mappings: list[ColumnMapping]
    boundaries: RowBoundaries
    stats: ImportStats
    data: SpreadsheetData | None = field(default=None, repr=False, compare=False)

    @property
    def data_row_count(self) -> int:
        return self.boundaries.row_range.row_count


@dataclass(frozen=True)
class FileDetection:
    file_name: str
    status: FileStatus
    elapsed_seconds: float
    detection: SheetDetection | None = None
    error_type: str | None = None  # UPPER_SNAKE classification when failed
    error: str | None = None  # Failure reason

    @property
    def data_rows(self) -> int:
        return self.detection.data_row_count if self.detection is not None else 0


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a run, rendered as the SUMMARY line."""
    success_files: int
    failed_files: int
    total_data_rows: int  # Sum of detected data rows over successful files
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    files: list[FileDetection] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
