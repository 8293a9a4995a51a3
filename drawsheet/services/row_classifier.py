from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.column_mapping import ColumnMapping
from ..models.config_models import HeuristicsConfig
from ..models.grid import CellValue, StyleGrid
from ..models.row_analysis import RowAnalysis, RowClassification, RowLabel, RowSignals
from .row_signals import extract_row_signals

"""Row classification.

Turns per-row signals into header / total / closing scores using a flat
weighted sum, then labels at most one row per special class:

1. rows without a category are ``empty``
2. every other row is scored and provisionally ``data``
3. the best header row above the header threshold is chosen
4. the best total and closing rows are chosen among rows after the header,
   with a proximity penalty for rows within a few rows of the header

The weights were tuned against real lender spreadsheets; keep them as they are.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "score_header",
    "score_total",
    "score_closing",
    "classify_rows",
    "analyze_rows",
]

# Header score weights
HEADER_KEYWORD_WEIGHT = 50
HEADER_BOLD_NO_AMOUNT_WEIGHT = 20
HEADER_NO_AMOUNT_WEIGHT = 10
HEADER_AFTER_GAP_WEIGHT = 15
HEADER_AFTER_GAP_MAX_ROW = 5  # exclusive
HEADER_TOP_ROWS_WEIGHT = 25
HEADER_TOP_ROWS = 3  # exclusive
HEADER_MULTI_TEXT_WEIGHT = 45
HEADER_LOW_ROW_PENALTY = 40
HEADER_LOW_ROW_START = 5  # penalty applies to rows after this index
HEADER_THRESHOLD = 50  # strictly greater

# Total score weights
TOTAL_KEYWORD_WEIGHT = 40
TOTAL_SUM_MATCH_WEIGHT = 50
TOTAL_BOLD_AMOUNT_WEIGHT = 20
TOTAL_BEFORE_GAP_WEIGHT = 10
TOTAL_THRESHOLD = 40
TOTAL_PROXIMITY_PENALTY = 25

# Closing score weights
CLOSING_BOLD_WEIGHT = 10
CLOSING_THRESHOLD = 35
CLOSING_PROXIMITY_PENALTY = 30

PROXIMITY_ROWS = 5  # rows after the header that receive the proximity penalty
DATA_CONFIDENCE = 50
EMPTY_CONFIDENCE = 100
MAX_CONFIDENCE = 100


def score_header(s: RowSignals) -> int:
    score = 0
    if s.has_header_keyword:
        score += HEADER_KEYWORD_WEIGHT
    if s.is_bold and not s.has_amount:
        score += HEADER_BOLD_NO_AMOUNT_WEIGHT
    if not s.has_amount and s.has_category:
        score += HEADER_NO_AMOUNT_WEIGHT
    if s.follows_gap and s.row_index < HEADER_AFTER_GAP_MAX_ROW:
        score += HEADER_AFTER_GAP_WEIGHT
    if s.row_index < HEADER_TOP_ROWS:
        score += HEADER_TOP_ROWS_WEIGHT
    if s.is_multi_column_text_row and not s.has_amount:
        score += HEADER_MULTI_TEXT_WEIGHT
    if s.row_index > HEADER_LOW_ROW_START:
        score -= HEADER_LOW_ROW_PENALTY
    return score


def score_total(s: RowSignals) -> int:
    score = 0
    if s.has_total_keyword:
        score += TOTAL_KEYWORD_WEIGHT
    if s.amount_matches_sum:
        score += TOTAL_SUM_MATCH_WEIGHT
    if s.is_bold and s.has_amount:
        score += TOTAL_BOLD_AMOUNT_WEIGHT
    if s.precedes_gap:
        score += TOTAL_BEFORE_GAP_WEIGHT
    return score


def score_closing(s: RowSignals) -> int:
    score = s.closing_keyword_score
    if s.is_bold:
        score += CLOSING_BOLD_WEIGHT
    return score


@dataclass
class _Scored:
    signals: RowSignals
    header: int
    total: int
    closing: int


def _pick_best(
    candidates: list[tuple[int, int, int]],
) -> tuple[int, int] | None:
    """Pick (row_index, raw_score) with the highest ranking score; first one wins ties."""
    best: tuple[int, int, int] | None = None
    for cand in candidates:
        if best is None or cand[1] > best[1]:
            best = cand
    if best is None:
        return None
    return best[0], best[2]


def _select_after_header(
    scored: list[_Scored],
    header_index: int | None,
    score_of,
    threshold: int,
    penalty: int,
    exclude: set[int],
) -> tuple[int, int] | None:
    candidates: list[tuple[int, int, int]] = []  # (row_index, ranking score, raw score)
    for sc in scored:
        idx = sc.signals.row_index
        if idx in exclude or (header_index is not None and idx <= header_index):
            continue
        raw = score_of(sc)
        if raw < threshold:
            continue
        ranking = raw
        if header_index is not None and idx - header_index <= PROXIMITY_ROWS:
            ranking -= penalty
        candidates.append((idx, ranking, raw))
    return _pick_best(candidates)


def classify_rows(signals: Sequence[RowSignals]) -> list[RowAnalysis]:
    """Classify rows from their signals with single-best selection per special class.

    Args:
        signals: RowSignals in row order

    Returns:
        One RowAnalysis per row. At most one row is labeled header, at most one
        total and at most one closing; every other non-empty row is data.
    """
    labels: dict[int, tuple[RowLabel, int]] = {}
    scored: list[_Scored] = []

    # Step 1 + 2: empty rows are settled immediately, the rest are scored as data
    for s in signals:
        if not s.has_category:
            labels[s.row_index] = (RowLabel.EMPTY, EMPTY_CONFIDENCE)
            continue
        scored.append(_Scored(s, score_header(s), score_total(s), score_closing(s)))
        labels[s.row_index] = (RowLabel.DATA, DATA_CONFIDENCE)

    # Step 3: single best header
    header_index: int | None = None
    best_header: _Scored | None = None
    for sc in scored:
        if sc.header > HEADER_THRESHOLD and (best_header is None or sc.header > best_header.header):
            best_header = sc
    if best_header is not None:
        header_index = best_header.signals.row_index
        labels[header_index] = (RowLabel.HEADER, min(MAX_CONFIDENCE, best_header.header))

    # Step 4: single best total, then closing, restricted to rows after the header
    total = _select_after_header(
        scored, header_index, lambda sc: sc.total, TOTAL_THRESHOLD, TOTAL_PROXIMITY_PENALTY, set()
    )
    taken: set[int] = set()
    if total is not None:
        labels[total[0]] = (RowLabel.TOTAL, min(MAX_CONFIDENCE, total[1]))
        taken.add(total[0])

    closing = _select_after_header(
        scored, header_index, lambda sc: sc.closing, CLOSING_THRESHOLD, CLOSING_PROXIMITY_PENALTY, taken
    )
    if closing is not None:
        labels[closing[0]] = (RowLabel.CLOSING, min(MAX_CONFIDENCE, closing[1]))

    logger.debug(
        f"row classification: header={header_index} "
        f"total={total[0] if total else None} closing={closing[0] if closing else None}"
    )

    by_index = {sc.signals.row_index: sc for sc in scored}
    results: list[RowAnalysis] = []
    for s in signals:
        label, confidence = labels[s.row_index]
        sc = by_index.get(s.row_index)
        results.append(
            RowAnalysis(
                signals=s,
                classification=RowClassification(row_index=s.row_index, label=label, confidence=confidence),
                header_score=sc.header if sc else 0,
                total_score=sc.total if sc else 0,
                closing_score=sc.closing if sc else 0,
            )
        )
    return results


def analyze_rows(
    rows: Sequence[Sequence[CellValue]],
    mappings: Sequence[ColumnMapping],
    styles: StyleGrid | None = None,
    *,
    config: HeuristicsConfig | None = None,
) -> list[RowAnalysis]:
    """Extract signals for every row and classify them.

    Raises:
        ColumnMappingError: If no category column is mapped
    """
    return classify_rows(extract_row_signals(rows, mappings, styles, config=config))
