from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl import load_workbook

from ..models.grid import CellStyle, CellValue, SheetInfo, SpreadsheetData, StyleGrid, WorkbookInfo

"""Spreadsheet decoding.

Turns a workbook file into the in-memory grids the heuristics work on:
- first row of a sheet is the header row, everything below is data
- NaN cells become None, numpy scalars become plain Python values
- cell styles (bold, borders) are read separately with openpyxl; row 0 of the
  style grid is the header row

Sheets are read raw (``header=None``) so nothing is dropped or renamed before
the header row is chosen.
"""

__all__ = [
    "EmptySpreadsheetError",
    "SheetNotFoundError",
    "get_workbook_info",
    "parse_sheet",
    "parse_spreadsheet",
    "read_cell_styles",
]


class EmptySpreadsheetError(Exception):
    """Raised when a sheet (or a grid handed to the heuristics) holds no rows."""


class SheetNotFoundError(Exception):
    """Raised when a requested sheet does not exist in the workbook."""


def _to_cell(value: Any) -> CellValue:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        # numpy scalar
        return value.item()
    return value


def _header_text(value: CellValue) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def get_workbook_info(path: Path | str) -> WorkbookInfo:
    """Open a workbook and collect per-sheet row and column counts."""
    frames: dict[str, pd.DataFrame] = {}
    sheets: list[SheetInfo] = []
    with pd.ExcelFile(path) as xls:
        for name in xls.sheet_names:
            df = xls.parse(name, header=None)
            frames[str(name)] = df
            sheets.append(SheetInfo(name=str(name), row_count=int(df.shape[0]), column_count=int(df.shape[1])))
    return WorkbookInfo(path=str(path), sheets=sheets, frames=frames)


def parse_sheet(workbook: WorkbookInfo, sheet_name: str) -> SpreadsheetData:
    """Decode one sheet into headers and data rows.

    Raises:
        SheetNotFoundError: If the workbook has no sheet called ``sheet_name``
        EmptySpreadsheetError: If the sheet has no rows at all
    """
    df = workbook.frames.get(sheet_name)
    if df is None:
        raise SheetNotFoundError(f'Sheet "{sheet_name}" not found')
    if df.shape[0] == 0:
        raise EmptySpreadsheetError("Empty spreadsheet")

    grid = [[_to_cell(v) for v in row] for row in df.astype(object).values.tolist()]
    headers = [_header_text(v) for v in grid[0]]
    return SpreadsheetData(headers=headers, rows=grid[1:], sheet_name=sheet_name)


def parse_spreadsheet(path: Path | str) -> SpreadsheetData:
    """Decode the sheet with the most rows, which is usually the budget sheet."""
    info = get_workbook_info(path)
    if not info.sheets:
        raise EmptySpreadsheetError("Empty spreadsheet")
    return parse_sheet(info, info.largest_sheet().name)


def _has_border(side: Any) -> bool:
    return side is not None and side.style is not None


def read_cell_styles(path: Path | str, sheet_name: str) -> StyleGrid:
    """Read bold / border flags for every cell of a sheet, header row first.

    Raises:
        SheetNotFoundError: If the workbook has no sheet called ``sheet_name``
    """
    wb = load_workbook(path, data_only=True)
    try:
        if sheet_name not in wb.sheetnames:
            raise SheetNotFoundError(f'Sheet "{sheet_name}" not found')
        ws = wb[sheet_name]
        styles: StyleGrid = []
        for row in ws.iter_rows(min_row=1, min_col=1, max_col=ws.max_column):
            style_row: list[CellStyle | None] = []
            for cell in row:
                font = cell.font
                border = cell.border
                style_row.append(
                    CellStyle(
                        bold=bool(font is not None and font.bold),
                        border_top=_has_border(border.top) if border is not None else False,
                        border_bottom=_has_border(border.bottom) if border is not None else False,
                        border_left=_has_border(border.left) if border is not None else False,
                        border_right=_has_border(border.right) if border is not None else False,
                    )
                )
            styles.append(style_row)
        return styles
    finally:
        wb.close()
