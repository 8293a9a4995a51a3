# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from pathlib import Path
from typing import Any, Callable

import pandas as pd
import pytest
from openpyxl import load_workbook
from openpyxl.styles import Font

from drawsheet.logging.init import LOGGER_NAME, reset_logging

BUDGET_CATEGORIES = [
    "Site Work", "Foundation", "Framing", "Roofing", "Windows", "Exterior Doors",
    "Siding", "Plumbing", "Electrical", "HVAC", "Insulation", "Drywall",
    "Interior Trim", "Cabinets", "Countertops", "Flooring", "Painting",
    "Appliances", "Landscaping", "Cleanup",
]

# No amount lands within 10% of the running sum above it
BUDGET_AMOUNTS = [
    30000, 8000, 8500, 9000, 7500, 6000, 12000, 4500, 9500, 10000,
    5500, 7000, 8000, 9000, 6500, 11000, 7500, 8500, 9500, 7000,
]

BUDGET_HEADERS = ["Cost Code", "Description", "Budgeted Amount"]


@pytest.fixture(autouse=True)
def fresh_logging():
    # The handler binds sys.stdout at setup time; rebuild it per test for capsys
    reset_logging()
    yield
    reset_logging()
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("DRAWSHEET_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """import_type: budget
log_level: INFO
heuristics:
  sample_rows: 30
  min_real_numbers: 10
  sum_tolerance: 0.1
  sum_floor: 1000
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "drawsheet.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def budget_rows() -> list[list[Any]]:
    """20 line items, a blank row, then a Total row equal to their sum."""
    rows: list[list[Any]] = [
        [f"{(i // 10) + 1:02d}-{(i % 10 + 1) * 100}", cat, amt]
        for i, (cat, amt) in enumerate(zip(BUDGET_CATEGORIES, BUDGET_AMOUNTS))
    ]
    rows.append([None, None, None])
    rows.append(["", "Total", sum(BUDGET_AMOUNTS)])
    return rows


def write_excel(
    path: Path,
    sheets: dict[str, list[list[object]]],
    bold_rows: dict[str, list[int]] | None = None,
) -> Path:
    """Write raw rows per sheet (no pandas header) and bold the given 1-based rows."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    if bold_rows:
        wb = load_workbook(path)
        try:
            for sheet_name, numbers in bold_rows.items():
                ws = wb[sheet_name]
                for n in numbers:
                    for cell in ws[n]:
                        cell.font = Font(bold=True)
            wb.save(path)
        finally:
            wb.close()
    return path


@pytest.fixture()
def make_excel(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str, sheets: dict[str, list[list[object]]], bold_rows: dict[str, list[int]] | None = None) -> Path:
        return write_excel(temp_workdir / "data" / name, sheets, bold_rows)
    return _make


@pytest.fixture()
def budget_workbook(make_excel, budget_rows) -> Path:
    # Header on worksheet row 1, Total on row 23
    return make_excel("budget.xlsx", {"Budget": [BUDGET_HEADERS] + budget_rows}, {"Budget": [1, 23]})
