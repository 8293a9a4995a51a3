from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import replace

from ..models.column_mapping import ColumnMapping, ColumnRole
from ..models.config_models import HeuristicsConfig
from ..models.grid import CellValue, StyleGrid, is_empty_cell
from ..models.row_analysis import RowSignals
from .column_mapper import find_mapping, require_mapping

"""Per-row signal extraction.

Two passes over the grid. The first pass looks at each row on its own: keyword
hits in the category cell, boldness, parsed amount and how many cells hold
text. The second pass needs the neighbours: blank-row gaps around each row and
whether the amount equals the running sum of the rows above (a subtotal).
"""

logger = logging.getLogger(__name__)

__all__ = [
    "HEADER_TERMS",
    "TOTAL_TERMS",
    "CLOSING_TERM_WEIGHTS",
    "parse_amount",
    "looks_numeric",
    "closing_keyword_score",
    "has_header_keyword",
    "has_total_keyword",
    "extract_row_signals",
]

HEADER_TERMS = (
    "item", "items", "description", "budget", "amount", "rough", "final",
    "column", "category", "line item", "cost code", "trade", "scope",
)
HEADER_TERM_SLACK = 5  # chars allowed after a header term ("Budget ($)")

TOTAL_TERMS = ("total", "subtotal", "grand total", "sum", "totals")

STRONG_CLOSING_WEIGHT = 40
MEDIUM_CLOSING_WEIGHT = 25
WEAK_CLOSING_WEIGHT = 15

CLOSING_TERM_WEIGHTS: dict[str, int] = {
    "interest": STRONG_CLOSING_WEIGHT,
    "realtor": STRONG_CLOSING_WEIGHT,
    "closing cost": STRONG_CLOSING_WEIGHT,
    "closing costs": STRONG_CLOSING_WEIGHT,
    "finance": MEDIUM_CLOSING_WEIGHT,
    "loan fee": MEDIUM_CLOSING_WEIGHT,
    "points": MEDIUM_CLOSING_WEIGHT,
    "origination": MEDIUM_CLOSING_WEIGHT,
    "discount points": MEDIUM_CLOSING_WEIGHT,
    "title": WEAK_CLOSING_WEIGHT,
    "escrow": WEAK_CLOSING_WEIGHT,
    "recording": WEAK_CLOSING_WEIGHT,
    "appraisal fee": WEAK_CLOSING_WEIGHT,
    "inspection fee": WEAK_CLOSING_WEIGHT,
    "prepaid": WEAK_CLOSING_WEIGHT,
}

GAP_SCAN_ROWS = 3
MIN_GAP_ROWS = 2

_AMOUNT_STRIP_RE = re.compile(r"[$,()\s]")
# Leading numeric part; trailing notes such as "*" or "est." are ignored
_AMOUNT_PREFIX_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_NUMERIC_STRIP_RE = re.compile(r"[$%,\s]")


def parse_amount(value: CellValue) -> float:
    """Parse a cell into an amount; empty or unparseable values become 0."""
    if is_empty_cell(value) or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    match = _AMOUNT_PREFIX_RE.match(_AMOUNT_STRIP_RE.sub("", str(value)))
    if match is None:
        return 0.0
    amount = float(match.group())
    return amount if math.isfinite(amount) else 0.0


def looks_numeric(value: CellValue) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(_NUMERIC_STRIP_RE.sub("", str(value)))
    except ValueError:
        return False
    return True


def has_header_keyword(text: str) -> bool:
    for term in HEADER_TERMS:
        if text == term or (text.startswith(term) and len(text) <= len(term) + HEADER_TERM_SLACK):
            return True
    return False


def has_total_keyword(text: str) -> bool:
    return any(term in text for term in TOTAL_TERMS)


def closing_keyword_score(text: str) -> int:
    """Sum of the weights of every closing-cost term contained in ``text``."""
    return sum(weight for term, weight in CLOSING_TERM_WEIGHTS.items() if term in text)


def _category_text(value: CellValue) -> str:
    if is_empty_cell(value):
        return ""
    return str(value).strip().lower()


def _cell(row: Sequence[CellValue], index: int) -> CellValue:
    return row[index] if 0 <= index < len(row) else None


def _is_bold(styles: StyleGrid | None, row_index: int, column: int) -> bool:
    # Style grid row 0 is the header row
    if not styles:
        return False
    style_row = row_index + 1
    if style_row >= len(styles) or column >= len(styles[style_row]):
        return False
    style = styles[style_row][column]
    return bool(style is not None and style.bold)


def _has_gap(has_category: list[bool], index: int, step: int) -> bool:
    blanks = 0
    j = index + step
    while 0 <= j < len(has_category) and blanks < GAP_SCAN_ROWS:
        if has_category[j]:
            break
        blanks += 1
        j += step
    return blanks >= MIN_GAP_ROWS


def extract_row_signals(
    rows: Sequence[Sequence[CellValue]],
    mappings: Sequence[ColumnMapping],
    styles: StyleGrid | None = None,
    *,
    config: HeuristicsConfig | None = None,
) -> list[RowSignals]:
    """Compute RowSignals for every data row.

    Args:
        rows: Data rows (header excluded)
        mappings: Column mappings; the category role is required
        styles: Optional style grid whose row 0 is the header row
        config: Heuristic parameters (defaults when omitted)

    Returns:
        One RowSignals per row, in row order

    Raises:
        ColumnMappingError: If no category column is mapped
    """
    cfg = config or HeuristicsConfig()
    category_col = require_mapping(mappings, ColumnRole.CATEGORY).index
    amount_mapping = find_mapping(mappings, ColumnRole.AMOUNT)
    amount_col = amount_mapping.index if amount_mapping is not None else -1

    first_pass: list[RowSignals] = []
    for i, row in enumerate(rows):
        text = _category_text(_cell(row, category_col))
        amount = parse_amount(_cell(row, amount_col)) if amount_col >= 0 else 0.0
        text_cells = sum(1 for v in row if not is_empty_cell(v) and not looks_numeric(v))
        first_pass.append(
            RowSignals(
                row_index=i,
                category_text=text,
                amount=amount,
                has_header_keyword=has_header_keyword(text),
                has_total_keyword=has_total_keyword(text),
                closing_keyword_score=closing_keyword_score(text),
                is_bold=_is_bold(styles, i, category_col),
                text_cell_count=text_cells,
            )
        )

    has_category = [s.has_category for s in first_pass]
    signals: list[RowSignals] = []
    running_sum = 0.0
    for s in first_pass:
        matches = s.has_category and s.has_amount and cfg.amount_matches_sum(
            s.amount, running_sum, relative_to_amount=True
        )
        signals.append(
            replace(
                s,
                follows_gap=_has_gap(has_category, s.row_index, -1),
                precedes_gap=_has_gap(has_category, s.row_index, 1),
                amount_matches_sum=matches,
            )
        )
        if s.has_category and s.amount > 0:
            running_sum += abs(s.amount)

    logger.debug(f"row signals: rows={len(signals)} category_col={category_col} amount_col={amount_col}")
    return signals
