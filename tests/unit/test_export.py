from __future__ import annotations

import json

import pytest

from drawsheet.models.column_export import ImportType
from drawsheet.models.column_mapping import ColumnMapping, ColumnRole
from drawsheet.models.grid import SpreadsheetData
from drawsheet.models.row_analysis import RowRange
from drawsheet.services.column_mapper import ColumnMappingError
from drawsheet.services.export import (
    calculate_import_stats,
    extract_mapped_data,
    include_row,
    prepare_column_export,
)

MAPPINGS = [
    ColumnMapping(0, "Cost Code"),
    ColumnMapping(1, "Description", ColumnRole.CATEGORY, 0.95),
    ColumnMapping(2, "Budget", ColumnRole.AMOUNT, 0.95),
]


@pytest.fixture()
def sheet() -> SpreadsheetData:
    return SpreadsheetData(
        headers=["Cost Code", "Description", "Budget"],
        rows=[
            ["01-100", "Site Work", "$30,000"],
            ["01-200", " Framing ", 0],
            ["01-300", None, 500],
            ["01-400", "Roofing", "n/a"],
            ["", "Total", 30500],
        ],
        sheet_name="Budget",
    )


def test_include_row_budget_vs_draw():
    assert include_row("Framing", 0, ImportType.BUDGET) is True
    assert include_row("Framing", 0, ImportType.DRAW) is False
    assert include_row("Framing", 10, ImportType.DRAW) is True
    assert include_row("", 10, ImportType.BUDGET) is False


def test_extract_mapped_data(sheet: SpreadsheetData):
    categories, amounts = extract_mapped_data(sheet.rows, MAPPINGS)
    assert categories == ["Site Work", "Framing", "", "Roofing", "Total"]
    assert amounts == [30000.0, 0.0, 500.0, 0.0, 30500.0]


def test_extract_mapped_data_unmapped_column_is_empty(sheet: SpreadsheetData):
    categories, amounts = extract_mapped_data(sheet.rows, MAPPINGS[:2])
    assert len(categories) == 5
    assert amounts == []


def test_calculate_import_stats(sheet: SpreadsheetData):
    stats = calculate_import_stats(sheet.rows[:4], MAPPINGS)
    assert stats.total_rows == 4
    assert stats.rows_with_category == 3
    assert stats.empty_categories == 1
    assert stats.total_amount == 30500.0
    assert stats.zero_amount_rows == 2


def test_budget_export_keeps_zero_amount_rows(sheet: SpreadsheetData):
    export = prepare_column_export(
        sheet, MAPPINGS, ImportType.BUDGET,
        project_id="p-1", file_name="budget.xlsx", draw_number=3, row_range=RowRange(0, 3),
    )
    assert export.category_values == ["Site Work", "Framing", "Roofing"]
    assert export.amount_values == [30000.0, 0.0, 0.0]
    assert export.total_rows == 3
    # draw number only travels with draw imports
    assert export.draw_number is None


def test_draw_export_drops_non_positive_amounts(sheet: SpreadsheetData):
    export = prepare_column_export(
        sheet, MAPPINGS, ImportType.DRAW,
        project_id="p-1", file_name="draw.xlsx", draw_number=3, row_range=RowRange(0, 3),
    )
    assert export.category_values == ["Site Work"]
    assert export.amount_values == [30000.0]
    assert export.draw_number == 3


def test_export_without_range_uses_all_rows(sheet: SpreadsheetData):
    export = prepare_column_export(sheet, MAPPINGS, ImportType.BUDGET, project_id="p", file_name="f.xlsx")
    assert export.category_values[-1] == "Total"


def test_payload_shape(sheet: SpreadsheetData):
    export = prepare_column_export(
        sheet, MAPPINGS, ImportType.DRAW,
        project_id="p-9", file_name="draw.xlsx", draw_number=2, row_range=RowRange(0, 0),
    )
    payload = export.to_payload()
    assert payload == {
        "type": "draw",
        "projectId": "p-9",
        "drawNumber": 2,
        "columns": {
            "category": {"header": "Description", "values": ["Site Work"]},
            "amount": {"header": "Budget", "values": [30000.0]},
        },
        "metadata": {"fileName": "draw.xlsx", "sheetName": "Budget", "totalRows": 1},
    }
    json.dumps(payload)


def test_export_requires_both_mappings(sheet: SpreadsheetData):
    with pytest.raises(ColumnMappingError, match="No amount column mapped"):
        prepare_column_export(sheet, MAPPINGS[:2], ImportType.BUDGET, project_id="p", file_name="f.xlsx")
