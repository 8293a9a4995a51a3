from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.column_mapping import ColumnContentProfile, ColumnMapping, ColumnRole
from ..models.config_models import HeuristicsConfig
from ..models.grid import CellValue
from .column_analyzer import analyze_column_data

"""Column mapping detection.

Finds the category (line item label) column and the amount column of a budget
or draw sheet from header keywords, backed by content analysis of the first
rows. Keyword hits for the amount column only count when the column actually
holds real numbers, so a "Notes on cost" text column is never picked.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "CATEGORY_KEYWORDS",
    "AMOUNT_KEYWORDS",
    "ColumnMappingError",
    "detect_column_mappings",
    "find_mapping",
    "require_mapping",
]

KEYWORD_CONFIDENCE = 0.95
CATEGORY_PATTERN_CONFIDENCE = 0.75
AMOUNT_PATTERN_CONFIDENCE = 0.7
MIN_CATEGORY_UNIQUE_VALUES = 3

CATEGORY_KEYWORDS = (
    "category", "description", "line item", "item", "cost code",
    "division", "trade", "scope", "work item", "nahb", "builder category",
    "expense", "type", "name",
)

# Headers naming codes or divisions label rows but rarely describe them; they
# only win when no descriptive header exists.
IDENTIFIER_KEYWORDS = ("cost code", "code", "division")

AMOUNT_KEYWORDS = (
    "budget", "budgeted", "original", "contract", "scheduled",
    "approved amount", "total budget", "cost", "estimate",
    "allocated", "planned", "rough budget", "final budget",
    "amount", "total", "draw", "funded", "requested", "disbursement",
    "payment", "this request", "current draw", "release", "payout",
)


class ColumnMappingError(Exception):
    """Raised when a required column (category or amount) has no mapping."""


def _normalize_header(header: object) -> str:
    return str(header if header is not None else "").lower().strip()


def _is_identifier_header(header: str) -> bool:
    return any(kw in header for kw in IDENTIFIER_KEYWORDS)


def _profile_columns(
    column_count: int, rows: Sequence[Sequence[CellValue]] | None, cfg: HeuristicsConfig
) -> list[ColumnContentProfile | None]:
    if not rows:
        return [None] * column_count
    sample = rows[: cfg.sample_rows]
    return [
        analyze_column_data((row[i] if i < len(row) else None for row in sample), config=cfg)
        for i in range(column_count)
    ]


def _find_category_by_keyword(headers: list[str]) -> int:
    for identifiers in (False, True):
        for i, header in enumerate(headers):
            if _is_identifier_header(header) != identifiers:
                continue
            if any(kw in header for kw in CATEGORY_KEYWORDS):
                return i
    return -1


def detect_column_mappings(
    headers: Sequence[object],
    rows: Sequence[Sequence[CellValue]] | None = None,
    *,
    config: HeuristicsConfig | None = None,
) -> list[ColumnMapping]:
    """Detect the category and amount columns of a sheet.

    Args:
        headers: Header row cells
        rows: Data rows used for content analysis (first ``sample_rows`` only).
            Without rows only header keywords can map the category column and
            the amount column stays unassigned.
        config: Heuristic parameters (defaults when omitted)

    Returns:
        One ColumnMapping per header, in column order. At most one column is
        mapped to each role; unmatched roles are simply left unassigned.
    """
    cfg = config or HeuristicsConfig()
    names = [str(h) if h is not None else "" for h in headers]
    normalized = [_normalize_header(h) for h in headers]
    mappings = [ColumnMapping(index=i, name=name) for i, name in enumerate(names)]
    profiles = _profile_columns(len(names), rows, cfg)

    # Step 1: category column - keyword header first, then leftmost diverse text column
    category_index = _find_category_by_keyword(normalized)
    if category_index >= 0:
        mappings[category_index] = mappings[category_index].with_role(ColumnRole.CATEGORY, KEYWORD_CONFIDENCE)
    else:
        for i, profile in enumerate(profiles):
            if (
                profile is not None
                and profile.is_text
                and not profile.is_numeric
                and profile.unique_values > MIN_CATEGORY_UNIQUE_VALUES
            ):
                category_index = i
                mappings[i] = mappings[i].with_role(ColumnRole.CATEGORY, CATEGORY_PATTERN_CONFIDENCE)
                break

    # Step 2: amount column - keyword header backed by real numbers
    amount_index = -1
    for i, header in enumerate(normalized):
        if mappings[i].role is not None or _is_identifier_header(header):
            continue
        if any(kw in header for kw in AMOUNT_KEYWORDS):
            profile = profiles[i]
            if profile is not None and profile.has_real_numbers:
                amount_index = i
                mappings[i] = mappings[i].with_role(ColumnRole.AMOUNT, KEYWORD_CONFIDENCE)
                break

    # Fallback: first column after the category column holding real numbers
    if amount_index == -1:
        start = category_index + 1 if category_index >= 0 else 0
        for i in range(start, len(names)):
            if mappings[i].role is not None:
                continue
            profile = profiles[i]
            if profile is not None and profile.has_real_numbers:
                amount_index = i
                mappings[i] = mappings[i].with_role(ColumnRole.AMOUNT, AMOUNT_PATTERN_CONFIDENCE)
                break

    logger.debug(
        f"column mapping: category={category_index} amount={amount_index} columns={len(names)}"
    )
    return mappings


def find_mapping(mappings: Sequence[ColumnMapping], role: ColumnRole) -> ColumnMapping | None:
    """Return the mapping holding ``role`` (first one if several), else None."""
    for m in mappings:
        if m.role is role:
            return m
    return None


def require_mapping(mappings: Sequence[ColumnMapping], role: ColumnRole) -> ColumnMapping:
    """Like find_mapping but raises ColumnMappingError when the role is unassigned."""
    mapping = find_mapping(mappings, role)
    if mapping is None:
        raise ColumnMappingError(f"No {role.value} column mapped")
    return mapping
