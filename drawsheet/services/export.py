from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.column_export import ColumnExport, ImportStats, ImportType
from ..models.column_mapping import ColumnMapping, ColumnRole
from ..models.grid import CellValue, SpreadsheetData, is_empty_cell
from ..models.row_analysis import RowRange
from .column_mapper import find_mapping, require_mapping
from .row_signals import parse_amount

"""Import statistics and column export packaging.

Once the mapping and row range are settled (detected or overridden by the
operator) only the two mapped columns leave the tool. Budget imports keep every
row with a category, $0 lines included; draw imports keep only rows with a
category and a positive amount.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "extract_mapped_data",
    "calculate_import_stats",
    "include_row",
    "prepare_column_export",
]


def _category_value(row: Sequence[CellValue], index: int) -> str:
    value = row[index] if index < len(row) else None
    return "" if is_empty_cell(value) else str(value).strip()


def _amount_value(row: Sequence[CellValue], index: int) -> float:
    return parse_amount(row[index] if index < len(row) else None)


def extract_mapped_data(
    rows: Sequence[Sequence[CellValue]], mappings: Sequence[ColumnMapping]
) -> tuple[list[str], list[float]]:
    """Pull the category and amount values of every row.

    Either list is empty when its column is not mapped; otherwise both have one
    entry per row.
    """
    category = find_mapping(mappings, ColumnRole.CATEGORY)
    amount = find_mapping(mappings, ColumnRole.AMOUNT)
    categories: list[str] = []
    amounts: list[float] = []
    for row in rows:
        if category is not None:
            categories.append(_category_value(row, category.index))
        if amount is not None:
            amounts.append(_amount_value(row, amount.index))
    return categories, amounts


def calculate_import_stats(
    rows: Sequence[Sequence[CellValue]], mappings: Sequence[ColumnMapping]
) -> ImportStats:
    """Summary counts shown next to the import preview."""
    category = find_mapping(mappings, ColumnRole.CATEGORY)
    amount = find_mapping(mappings, ColumnRole.AMOUNT)

    rows_with_category = 0
    empty_categories = 0
    total_amount = 0.0
    zero_amount_rows = 0
    for row in rows:
        if category is not None:
            if _category_value(row, category.index):
                rows_with_category += 1
            else:
                empty_categories += 1
        if amount is not None:
            value = _amount_value(row, amount.index)
            total_amount += value
            if value == 0:
                zero_amount_rows += 1

    return ImportStats(
        total_rows=len(rows),
        rows_with_category=rows_with_category,
        total_amount=total_amount,
        empty_categories=empty_categories,
        zero_amount_rows=zero_amount_rows,
    )


def include_row(category: str, amount: float, import_type: ImportType) -> bool:
    """Validity filter applied to each row before export."""
    if not category:
        return False
    if import_type is ImportType.DRAW:
        return amount > 0
    return True


def prepare_column_export(
    data: SpreadsheetData,
    mappings: Sequence[ColumnMapping],
    import_type: ImportType,
    *,
    project_id: str,
    file_name: str,
    draw_number: int | None = None,
    row_range: RowRange | None = None,
) -> ColumnExport:
    """Package the mapped columns of the selected rows for the import workflow.

    Args:
        data: Decoded sheet
        mappings: Final column mappings (detected or overridden)
        import_type: budget or draw; selects the row filter
        project_id: Project the import belongs to
        file_name: Source file name for the payload metadata
        draw_number: Draw number, kept for draw imports only
        row_range: Inclusive data row range; all rows when omitted

    Returns:
        ColumnExport with one category/amount pair per kept row

    Raises:
        ColumnMappingError: If the category or amount column is not mapped
    """
    category = require_mapping(mappings, ColumnRole.CATEGORY)
    amount = require_mapping(mappings, ColumnRole.AMOUNT)

    if row_range is None:
        selected = data.rows
    else:
        selected = data.rows[max(row_range.start_row, 0): row_range.end_row + 1]

    category_values: list[str] = []
    amount_values: list[float] = []
    for row in selected:
        cat = _category_value(row, category.index)
        amt = _amount_value(row, amount.index)
        if include_row(cat, amt, import_type):
            category_values.append(cat)
            amount_values.append(amt)

    logger.debug(
        f"column export: type={import_type.value} selected={len(selected)} kept={len(category_values)}"
    )
    return ColumnExport(
        type=import_type,
        project_id=project_id,
        category_header=category.name,
        category_values=category_values,
        amount_header=amount.name,
        amount_values=amount_values,
        file_name=file_name,
        sheet_name=data.sheet_name,
        draw_number=draw_number if import_type is ImportType.DRAW else None,
        total_rows=len(category_values),
    )
