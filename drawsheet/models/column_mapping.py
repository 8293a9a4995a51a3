from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Column mapping models.

ColumnMapping is the per-column outcome of header/content detection;
ColumnContentProfile is the statistical shape of a sampled column and only
lives for the duration of one detection call.
"""

__all__ = [
    "ColumnRole",
    "ColumnMapping",
    "ColumnContentProfile",
]


class ColumnRole(Enum):
    """Role a column plays in the import.

    An unassigned column carries ``role=None`` rather than a member here.
    """
    CATEGORY = "category"
    AMOUNT = "amount"
    IGNORE = "ignore"


@dataclass(frozen=True)
class ColumnMapping:
    index: int  # 0-based column index
    name: str  # Header text as found in the sheet
    role: ColumnRole | None = None
    confidence: float = 0.0  # 0..1

    def with_role(self, role: ColumnRole | None, confidence: float) -> ColumnMapping:
        return ColumnMapping(index=self.index, name=self.name, role=role, confidence=confidence)


@dataclass(frozen=True)
class ColumnContentProfile:
    """Counts gathered from a column sample plus the flags derived from them.

    ``real_number_count`` only counts non-zero numerics; dash placeholders
    count as numeric for typing but never as real numbers.
    """
    valid_count: int
    numeric_count: int
    text_count: int
    currency_count: int
    date_count: int
    placeholder_count: int
    real_number_count: int
    unique_values: int
    is_numeric: bool
    is_text: bool
    has_currency: bool
    has_date: bool
    has_real_numbers: bool
