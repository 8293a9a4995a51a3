from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime

from ..models.column_mapping import ColumnContentProfile
from ..models.config_models import HeuristicsConfig
from ..models.grid import CellValue, is_empty_cell

"""Column content analysis.

Classifies the statistical shape of a column sample: how many values look
numeric, currency, date-like or textual, how many distinct values there are, and
how many are "real" numbers (non-zero, not a dash placeholder).

Budget sheets often fill unused amount columns with " - " placeholders and a
couple of stray values, so "has real numbers" uses a fixed count instead of the
proportional threshold applied to the other flags.
"""

__all__ = [
    "analyze_column_data",
    "classify_value",
    "TYPE_THRESHOLD_RATIO",
]

TYPE_THRESHOLD_RATIO = 0.4

_CURRENCY_RE = re.compile(r"^\s*\$?\s*[\d,]+\.?\d*\s*$")
_PAREN_NEGATIVE_RE = re.compile(r"^\s*\(\s*\$?\s*[\d,]+\.?\d*\s*\)\s*$")
_MINUS_NEGATIVE_RE = re.compile(r"^\s*-\s*\$?\s*[\d,]+\.?\d*\s*$")
_DMY_RE = re.compile(r"^\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}$")
_YMD_RE = re.compile(r"^\d{4}[/\-]\d{1,2}[/\-]\d{1,2}$")
_PLACEHOLDER_RE = re.compile(r"^\s*-\s*$")
_DIGIT_RE = re.compile(r"\d")
_STRIP_RE = re.compile(r"[$,()\s\-]")

# Value kinds returned by classify_value
CURRENCY = "currency"
NUMBER = "number"
DATE = "date"
PLACEHOLDER = "placeholder"
TEXT = "text"


def _magnitude(text: str) -> float:
    try:
        return float(_STRIP_RE.sub("", text))
    except ValueError:
        return 0.0


def classify_value(value: CellValue) -> tuple[str | None, bool]:
    """Classify a single cell value.

    Returns:
        (kind, is_real) where kind is one of ``number``, ``currency``, ``date``,
        ``placeholder``, ``text`` or None for empty cells, and is_real tells
        whether the value is a non-zero number.
    """
    if is_empty_cell(value):
        return None, False
    if isinstance(value, bool):
        return TEXT, False
    if isinstance(value, (int, float)):
        return NUMBER, value != 0
    if isinstance(value, (datetime, date)):
        return DATE, False

    text = str(value)
    if _DIGIT_RE.search(text) and (
        _CURRENCY_RE.match(text) or _PAREN_NEGATIVE_RE.match(text) or _MINUS_NEGATIVE_RE.match(text)
    ):
        return CURRENCY, _magnitude(text) != 0
    stripped = text.strip()
    if _DMY_RE.match(stripped) or _YMD_RE.match(stripped):
        return DATE, False
    if _PLACEHOLDER_RE.match(text):
        return PLACEHOLDER, False
    return TEXT, False


def analyze_column_data(
    values: Iterable[CellValue], *, config: HeuristicsConfig | None = None
) -> ColumnContentProfile:
    """Build a ColumnContentProfile from a column sample.

    Args:
        values: Cell values of one column, top to bottom. Only the first
            ``config.sample_rows`` values are inspected.
        config: Heuristic parameters (defaults when omitted)

    Returns:
        Profile with raw counts and the derived type flags
    """
    cfg = config or HeuristicsConfig()

    valid = numeric = text = currency = dates = placeholders = real = 0
    unique: set[str] = set()

    for i, value in enumerate(values):
        if i >= cfg.sample_rows:
            break
        kind, is_real = classify_value(value)
        if kind is None:
            continue
        valid += 1
        unique.add(str(value).strip().lower())

        if kind in (NUMBER, CURRENCY, PLACEHOLDER):
            numeric += 1
        if kind == CURRENCY:
            currency += 1
        elif kind == DATE:
            dates += 1
        elif kind == PLACEHOLDER:
            placeholders += 1
        elif kind == TEXT:
            text += 1
        if is_real:
            real += 1

    threshold = max(valid * TYPE_THRESHOLD_RATIO, 1)
    return ColumnContentProfile(
        valid_count=valid,
        numeric_count=numeric,
        text_count=text,
        currency_count=currency,
        date_count=dates,
        placeholder_count=placeholders,
        real_number_count=real,
        unique_values=len(unique),
        is_numeric=numeric >= threshold,
        is_text=text >= threshold,
        has_currency=currency >= threshold,
        has_date=dates >= threshold,
        has_real_numbers=real >= cfg.min_real_numbers,
    )
