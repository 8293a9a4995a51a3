from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Union

"""Decoded spreadsheet grid models.

A grid is the in-memory form of one worksheet: a header row plus data rows of
text / number / empty cells. An optional style grid runs parallel to it (index 0
is the header row) and carries the per-cell formatting flags used by the row
heuristics.
"""

__all__ = [
    "CellValue",
    "CellStyle",
    "StyleGrid",
    "SpreadsheetData",
    "SheetInfo",
    "WorkbookInfo",
    "is_empty_cell",
]

CellValue = Union[str, int, float, date, datetime, None]


def is_empty_cell(value: object) -> bool:
    """True for None, blank strings and NaN floats."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


@dataclass(frozen=True)
class CellStyle:
    """Formatting flags for a single cell."""
    bold: bool = False
    border_top: bool = False
    border_bottom: bool = False
    border_left: bool = False
    border_right: bool = False


StyleGrid = list[list[Union[CellStyle, None]]]


@dataclass(frozen=True)
class SpreadsheetData:
    """One decoded worksheet.

    ``rows`` excludes the header row; every row is padded with ``None`` to the
    header width so column indexes are always safe to use.
    """
    headers: list[str]
    rows: list[list[CellValue]]
    sheet_name: str = ""

    def __post_init__(self) -> None:
        # Pad copies so the caller's grid is left untouched
        width = len(self.headers)
        padded = [list(row) + [None] * (width - len(row)) for row in self.rows]
        object.__setattr__(self, "rows", padded)

    @property
    def column_count(self) -> int:
        return len(self.headers)


@dataclass(frozen=True)
class SheetInfo:
    name: str
    row_count: int
    column_count: int


@dataclass(frozen=True)
class WorkbookInfo:
    """Sheets of an opened workbook plus their raw frames keyed by sheet name."""
    path: str
    sheets: list[SheetInfo]
    frames: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    def largest_sheet(self) -> SheetInfo:
        """Sheet with the most rows; the first one wins on ties."""
        best = self.sheets[0]
        for current in self.sheets[1:]:
            if current.row_count > best.row_count:
                best = current
        return best
