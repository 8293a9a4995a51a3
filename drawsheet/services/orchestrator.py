from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import (
    EmptySpreadsheetError,
    SheetNotFoundError,
    get_workbook_info,
    parse_sheet,
    read_cell_styles,
)
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.column_mapping import ColumnRole
from ..models.config_models import HeuristicsConfig
from ..models.grid import SpreadsheetData, StyleGrid
from ..models.processing_result import FileDetection, FileStatus, ProcessingResult, SheetDetection
from .column_mapper import ColumnMappingError, detect_column_mappings, require_mapping
from .export import calculate_import_stats
from .notifications import Notification, NotificationKind, NotificationRegistry
from .progress import ProgressTracker
from .row_range import detect_row_boundaries_with_analysis

"""Detection orchestration.

Coordinates a detection run: picks the sheet of each workbook, decodes grid and
styles, runs column mapping and row boundary detection, and aggregates the
per-file outcomes. A file that fails (unreadable, empty, required column not
found) is recorded in the error log and reported; the run carries on with the
next file.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SPREADSHEET_SUFFIXES",
    "ProcessingError",
    "detect_sheet",
    "process_file",
    "scan_spreadsheet_files",
    "process_all",
]

SPREADSHEET_SUFFIXES = (".xlsx", ".xlsm")


class ProcessingError(Exception):
    """Fatal error that prevents a run from starting."""


def detect_sheet(
    data: SpreadsheetData,
    styles: StyleGrid | None = None,
    *,
    config: HeuristicsConfig | None = None,
) -> SheetDetection:
    """Run the full detection pipeline on one decoded sheet.

    Raises:
        ColumnMappingError: If the category or amount column cannot be detected
        EmptySpreadsheetError: If the sheet has no data rows
    """
    if not data.rows:
        raise EmptySpreadsheetError("Empty spreadsheet")
    mappings = detect_column_mappings(data.headers, data.rows, config=config)
    require_mapping(mappings, ColumnRole.CATEGORY)
    require_mapping(mappings, ColumnRole.AMOUNT)

    boundaries = detect_row_boundaries_with_analysis(data.rows, mappings, styles, config=config)
    in_range = data.rows[boundaries.start_row: boundaries.end_row + 1]
    stats = calculate_import_stats(in_range, mappings)
    return SheetDetection(
        sheet_name=data.sheet_name,
        mappings=mappings,
        boundaries=boundaries,
        stats=stats,
        data=data,
    )


def _failed(
    file_path: Path,
    sheet_name: str,
    error_type: str,
    error: Exception,
    started: datetime,
    error_log: ErrorLogBuffer | None,
    registry: NotificationRegistry | None,
) -> FileDetection:
    message = str(error)
    if error_log is not None:
        error_log.append(
            ErrorRecord.create(
                file=file_path.name,
                sheet=sheet_name,
                row=-1,
                error_type=error_type,
                message=message,
            )
        )
    if registry is not None:
        registry.notify(Notification(NotificationKind.ERROR, f"{file_path.name}: import blocked", message))
    logger.debug(f"{file_path.name}: {error_type} {message}")
    return FileDetection(
        file_name=file_path.name,
        status=FileStatus.FAILED,
        elapsed_seconds=(datetime.now(UTC) - started).total_seconds(),
        error_type=error_type,
        error=message,
    )


def process_file(
    file_path: Path,
    *,
    sheet_name: str | None = None,
    config: HeuristicsConfig | None = None,
    error_log: ErrorLogBuffer | None = None,
    registry: NotificationRegistry | None = None,
) -> FileDetection:
    """Detect mapping and row range for one workbook.

    Args:
        file_path: Workbook to read
        sheet_name: Sheet to use; the sheet with most rows when omitted
        config: Heuristic parameters
        error_log: Buffer receiving an ErrorRecord when the file fails
        registry: Notification registry informed of the outcome

    Returns:
        FileDetection; failures are reported through its status, never raised
    """
    started = datetime.now(UTC)
    chosen = sheet_name or ""
    try:
        info = get_workbook_info(file_path)
        if not info.sheets:
            raise EmptySpreadsheetError("Empty spreadsheet")
        chosen = sheet_name or info.largest_sheet().name
        data = parse_sheet(info, chosen)
        styles = read_cell_styles(file_path, chosen)
        detection = detect_sheet(data, styles, config=config)
    except ColumnMappingError as e:
        return _failed(file_path, chosen, "COLUMN_MAPPING_ERROR", e, started, error_log, registry)
    except EmptySpreadsheetError as e:
        return _failed(file_path, chosen, "EMPTY_SPREADSHEET", e, started, error_log, registry)
    except SheetNotFoundError as e:
        return _failed(file_path, chosen, "SHEET_NOT_FOUND", e, started, error_log, registry)
    except Exception as e:
        return _failed(file_path, chosen, "READ_ERROR", e, started, error_log, registry)

    boundaries = detection.boundaries
    logger.info(
        f"{file_path.name} [{detection.sheet_name}]: rows {boundaries.start_row}-{boundaries.end_row} "
        f"({detection.data_row_count} data rows, confidence {boundaries.confidence:.0f})"
    )
    if registry is not None:
        registry.notify(
            Notification(
                NotificationKind.SUCCESS,
                f"{file_path.name}: {detection.data_row_count} line items detected",
            )
        )
    return FileDetection(
        file_name=file_path.name,
        status=FileStatus.SUCCESS,
        elapsed_seconds=(datetime.now(UTC) - started).total_seconds(),
        detection=detection,
    )


def scan_spreadsheet_files(directory: Path) -> list[Path]:
    """Scan a directory (non-recursive) for workbooks, sorted by name.

    Raises:
        ProcessingError: If the directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SPREADSHEET_SUFFIXES and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _expand_paths(paths: Iterable[Path]) -> list[Path]:
    files: list[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(scan_spreadsheet_files(p))
        elif p.exists():
            files.append(p)
        else:
            raise ProcessingError(f"Path not found: {p}")
    return files


def process_all(
    paths: Iterable[Path],
    *,
    sheet_name: str | None = None,
    config: HeuristicsConfig | None = None,
    registry: NotificationRegistry | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Run detection over files and directories.

    Args:
        paths: Workbook files and/or directories to scan
        sheet_name: Sheet to use in every workbook (largest sheet when omitted)
        config: Heuristic parameters
        registry: Notification registry informed of each file outcome
        error_log: Error buffer; a fresh one is created (and flushed) when omitted

    Returns:
        ProcessingResult with per-file detections

    Raises:
        ProcessingError: If a given path does not exist
    """
    start_time = datetime.now(UTC)
    file_paths = _expand_paths(paths)
    log = error_log if error_log is not None else ErrorLogBuffer()

    files: list[FileDetection] = []
    success = failed = total_rows = 0
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            result = process_file(
                file_path, sheet_name=sheet_name, config=config, error_log=log, registry=registry
            )
            if result.status is FileStatus.SUCCESS:
                success += 1
                total_rows += result.data_rows
            else:
                failed += 1
            progress.set_postfix(success=success, failed=failed, rows=total_rows)
            progress.finish_file(success=result.status is FileStatus.SUCCESS)
            files.append(result)

    if len(log):
        by_type = ", ".join(f"{k}={v}" for k, v in sorted(log.failures_by_type().items()))
        logger.debug(f"blocked imports: {by_type}")
        try:
            path = log.flush()
            logger.info(f"error log written: {path}")
        except OSError as e:
            logger.warning(f"could not write error log: {e}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success,
        failed_files=failed,
        total_data_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        files=files,
    )
