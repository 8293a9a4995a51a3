"""drawsheet: column and row detection for construction budget/draw spreadsheets."""

__version__ = "0.1.0"
