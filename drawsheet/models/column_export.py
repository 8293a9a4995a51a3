from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Import statistics and the column export payload handed to the downstream workflow."""

__all__ = [
    "ImportType",
    "ImportStats",
    "ColumnExport",
]


class ImportType(Enum):
    """How the amount column is interpreted downstream.

    - BUDGET: original line-item budget; a $0 line is still a valid line
    - DRAW: amounts requested in a draw; only positive amounts are kept
    """
    BUDGET = "budget"
    DRAW = "draw"


@dataclass(frozen=True)
class ImportStats:
    total_rows: int
    rows_with_category: int
    total_amount: float
    empty_categories: int
    zero_amount_rows: int


@dataclass(frozen=True)
class ColumnExport:
    """Values of the two mapped columns for the rows selected for import."""
    type: ImportType
    project_id: str
    category_header: str
    category_values: list[str]
    amount_header: str
    amount_values: list[float]
    file_name: str
    sheet_name: str
    draw_number: int | None = None  # draw imports only
    total_rows: int = 0

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready payload in the shape the workflow webhook expects."""
        return {
            "type": self.type.value,
            "projectId": self.project_id,
            "drawNumber": self.draw_number,
            "columns": {
                "category": {"header": self.category_header, "values": list(self.category_values)},
                "amount": {"header": self.amount_header, "values": list(self.amount_values)},
            },
            "metadata": {
                "fileName": self.file_name,
                "sheetName": self.sheet_name,
                "totalRows": self.total_rows,
            },
        }
