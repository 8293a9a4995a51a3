from __future__ import annotations

import logging
import statistics
from collections.abc import Sequence

from ..excel.reader import EmptySpreadsheetError
from ..models.column_mapping import ColumnMapping
from ..models.config_models import HeuristicsConfig
from ..models.grid import CellValue, StyleGrid
from ..models.row_analysis import RowAnalysis, RowBoundaries, RowLabel, RowRange
from .row_classifier import DATA_CONFIDENCE, analyze_rows

"""Data row range resolution.

Walks forward from the first data row and stops at the first classified total
or closing row, or at an unlabeled row whose amount equals the running sum of
the data above it. Blank and header rows inside the block are skipped without
extending the range.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "resolve_row_range",
    "detect_row_boundaries_with_analysis",
    "detect_row_boundaries",
]

_STOP_LABELS = (RowLabel.TOTAL, RowLabel.CLOSING)


def resolve_row_range(
    analysis: Sequence[RowAnalysis], *, config: HeuristicsConfig | None = None
) -> tuple[RowRange, float]:
    """Resolve the inclusive data row range and its aggregate confidence.

    Args:
        analysis: Classified rows in row order
        config: Heuristic parameters (defaults when omitted)

    Returns:
        (row_range, confidence). When no row is classified data the range is
        empty (start 0, end -1) and the confidence is the data default (50).
    """
    cfg = config or HeuristicsConfig()

    start_row = next((a.row_index for a in analysis if a.label is RowLabel.DATA), None)
    if start_row is None:
        return RowRange(start_row=0, end_row=-1), float(DATA_CONFIDENCE)

    end_row = start_row
    running_sum = 0.0
    for a in analysis:
        if a.row_index < start_row:
            continue
        if a.label in _STOP_LABELS:
            logger.debug(f"row range: stop at row {a.row_index} ({a.label.value})")
            break
        if a.label is not RowLabel.DATA:
            continue
        amount = abs(a.signals.amount)
        if cfg.amount_matches_sum(amount, running_sum):
            logger.debug(f"row range: stop at row {a.row_index} (amount matches running sum {running_sum})")
            break
        end_row = a.row_index
        running_sum += amount

    row_range = RowRange(start_row=start_row, end_row=end_row)
    confidences = [
        a.confidence for a in analysis if a.label is RowLabel.DATA and a.row_index in row_range
    ]
    confidence = float(statistics.mean(confidences)) if confidences else float(DATA_CONFIDENCE)
    return row_range, confidence


def detect_row_boundaries_with_analysis(
    rows: Sequence[Sequence[CellValue]],
    mappings: Sequence[ColumnMapping],
    styles: StyleGrid | None = None,
    *,
    config: HeuristicsConfig | None = None,
) -> RowBoundaries:
    """Classify every row and resolve the data row range.

    Raises:
        EmptySpreadsheetError: If there are no data rows at all
        ColumnMappingError: If no category column is mapped
    """
    if not rows:
        raise EmptySpreadsheetError("Empty spreadsheet")
    analysis = analyze_rows(rows, mappings, styles, config=config)
    row_range, confidence = resolve_row_range(analysis, config=config)
    logger.debug(
        f"row boundaries: start={row_range.start_row} end={row_range.end_row} confidence={confidence:.1f}"
    )
    return RowBoundaries(
        start_row=row_range.start_row,
        end_row=row_range.end_row,
        analysis=analysis,
        confidence=confidence,
    )


def detect_row_boundaries(
    rows: Sequence[Sequence[CellValue]],
    mappings: Sequence[ColumnMapping],
    styles: StyleGrid | None = None,
    *,
    config: HeuristicsConfig | None = None,
) -> RowRange:
    """Row range only; see detect_row_boundaries_with_analysis."""
    return detect_row_boundaries_with_analysis(rows, mappings, styles, config=config).row_range
