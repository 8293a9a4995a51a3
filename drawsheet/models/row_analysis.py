from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Row analysis models.

RowSignals holds everything the classifier knows about a row, RowClassification
the label it settled on. RowRange indexes the data rows of a grid (header row
excluded) and is inclusive on both ends.
"""

__all__ = [
    "RowLabel",
    "RowSignals",
    "RowClassification",
    "RowAnalysis",
    "RowRange",
    "RowBoundaries",
]


class RowLabel(Enum):
    HEADER = "header"
    DATA = "data"
    TOTAL = "total"
    CLOSING = "closing"
    EMPTY = "empty"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RowSignals:
    row_index: int
    category_text: str  # lower-cased, trimmed
    amount: float  # parsed amount, 0 when empty or unparseable
    has_header_keyword: bool = False
    has_total_keyword: bool = False
    closing_keyword_score: int = 0
    is_bold: bool = False
    text_cell_count: int = 0
    follows_gap: bool = False  # >= 2 blank rows right above
    precedes_gap: bool = False  # >= 2 blank rows right below
    amount_matches_sum: bool = False  # amount ~= running sum of rows above

    @property
    def has_category(self) -> bool:
        return self.category_text != ""

    @property
    def has_amount(self) -> bool:
        return self.amount != 0

    @property
    def has_closing_keyword(self) -> bool:
        return self.closing_keyword_score > 0

    @property
    def is_multi_column_text_row(self) -> bool:
        return self.text_cell_count >= 3


@dataclass(frozen=True)
class RowClassification:
    row_index: int
    label: RowLabel
    confidence: int  # 0..100


@dataclass(frozen=True)
class RowAnalysis:
    """Signals and final classification for one row, with the raw class scores."""
    signals: RowSignals
    classification: RowClassification
    header_score: int = 0
    total_score: int = 0
    closing_score: int = 0

    @property
    def row_index(self) -> int:
        return self.signals.row_index

    @property
    def label(self) -> RowLabel:
        return self.classification.label

    @property
    def confidence(self) -> int:
        return self.classification.confidence


@dataclass(frozen=True)
class RowRange:
    start_row: int
    end_row: int  # inclusive; end_row < start_row means no data rows

    @property
    def row_count(self) -> int:
        return max(0, self.end_row - self.start_row + 1)

    def __contains__(self, row_index: object) -> bool:
        return isinstance(row_index, int) and self.start_row <= row_index <= self.end_row


@dataclass(frozen=True)
class RowBoundaries:
    start_row: int
    end_row: int
    analysis: list[RowAnalysis]
    confidence: float

    @property
    def row_range(self) -> RowRange:
        return RowRange(start_row=self.start_row, end_row=self.end_row)

    def rows_labeled(self, label: RowLabel) -> list[int]:
        return [a.row_index for a in self.analysis if a.label is label]
