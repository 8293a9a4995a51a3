#!/usr/bin/env python3
"""Sample workbook generator for detection runs and performance testing.

Generates synthetic construction budget (or draw) workbooks in the shape
lenders actually receive:
- Row 1: Header row ("Cost Code", "Description", amount column, "Notes")
- Row 2+: Line items with a cost code, a category and a positive amount
- Optional blank row followed by a "Total" row equal to the summed amounts
- Optional closing-cost rows ("Interest Reserve", "Title & Escrow") below it

The total row is bolded so the style heuristics have something to find.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Font

CATEGORIES = [
    "Site Work", "Foundation", "Framing", "Roofing", "Windows", "Exterior Doors",
    "Siding", "Plumbing", "Electrical", "HVAC", "Insulation", "Drywall",
    "Interior Trim", "Cabinets", "Countertops", "Flooring", "Painting",
    "Appliances", "Landscaping", "Cleanup",
]

CLOSING_ROWS = [
    ("Interest Reserve", 6500.0),
    ("Title & Escrow", 2200.0),
]

AMOUNT_HEADERS = {
    "budget": "Budgeted Amount",
    "draw": "Current Draw",
}


def generate_line_items(rows: int, seed: int = 42) -> pd.DataFrame:
    """Generate budget line items.

    Args:
        rows: Number of line items
        seed: Random seed for reproducible data

    Returns:
        DataFrame with cost code, description, amount and notes columns
    """
    rng = np.random.default_rng(seed)

    descriptions = [
        CATEGORIES[i % len(CATEGORIES)] if i < len(CATEGORIES)
        else f"{CATEGORIES[i % len(CATEGORIES)]} Phase {i // len(CATEGORIES) + 1}"
        for i in range(rows)
    ]
    amounts = np.round(rng.uniform(2_000, 25_000, rows), 0)
    # Site work leads above the per-item maximum so no later item looks like a subtotal
    amounts[0] = np.round(rng.uniform(30_000, 60_000), 0)

    return pd.DataFrame(
        {
            "Cost Code": [f"{(i // 10) + 1:02d}-{(i % 10 + 1) * 100}" for i in range(rows)],
            "Description": descriptions,
            "Amount": amounts.tolist(),
            "Notes": [""] * rows,
        }
    )


def create_budget_workbook(
    output_path: Path,
    rows: int,
    *,
    import_type: str = "budget",
    with_total: bool = True,
    with_closing: bool = False,
    sheet_name: str = "Budget",
    seed: int = 42,
) -> float:
    """Write a budget workbook and return the summed line item amount.

    Args:
        output_path: Path where the workbook will be saved
        rows: Number of line items
        import_type: ``budget`` or ``draw``; selects the amount header
        with_total: Add a blank row and a bold "Total" row after the items
        with_closing: Add closing-cost rows after the total
        sheet_name: Worksheet name
        seed: Random seed for reproducible data
    """
    df = generate_line_items(rows, seed)
    df = df.rename(columns={"Amount": AMOUNT_HEADERS[import_type]})
    total = float(df[AMOUNT_HEADERS[import_type]].sum())

    sheet_data: list[list[Any]] = [df.columns.tolist()]
    for _, row in df.iterrows():
        sheet_data.append(row.tolist())
    total_row_number: int | None = None
    if with_total:
        sheet_data.append([None] * len(df.columns))
        sheet_data.append(["", "Total", total, ""])
        total_row_number = len(sheet_data)  # 1-based worksheet row
    if with_closing:
        for label, amount in CLOSING_ROWS:
            sheet_data.append(["", label, amount, ""])

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(sheet_data).to_excel(writer, sheet_name=sheet_name, header=False, index=False)

    # Bold header and total rows, as lenders' templates do
    wb = load_workbook(output_path)
    try:
        ws = wb[sheet_name]
        bold_rows = [1] + ([total_row_number] if total_row_number is not None else [])
        for row_number in bold_rows:
            for cell in ws[row_number]:
                cell.font = Font(bold=True)
        wb.save(output_path)
    finally:
        wb.close()
    return total


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic construction budget workbooks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 20 line items followed by a Total row
  %(prog)s budget.xlsx

  # Large draw sheet with closing-cost rows
  %(prog)s draw.xlsx --rows 5000 --type draw --closing
        """,
    )
    parser.add_argument("output", type=Path, help="Output workbook path")
    parser.add_argument("--rows", type=int, default=20, help="Number of line items (default: 20)")
    parser.add_argument("--type", dest="import_type", choices=sorted(AMOUNT_HEADERS), default="budget")
    parser.add_argument("--no-total", action="store_true", help="Omit the Total row")
    parser.add_argument("--closing", action="store_true", help="Append closing-cost rows")
    parser.add_argument("--sheet", default="Budget", help="Sheet name (default: Budget)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    try:
        total = create_budget_workbook(
            args.output,
            args.rows,
            import_type=args.import_type,
            with_total=not args.no_total,
            with_closing=args.closing,
            sheet_name=args.sheet,
            seed=args.seed,
        )
    except Exception as e:
        print(f"Error generating workbook: {e}", file=sys.stderr)
        return 1

    print(f"Created workbook: {args.output}")
    print(f"  Line items: {args.rows:,}")
    print(f"  Total amount: {total:,.0f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
