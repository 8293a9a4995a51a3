"""Domain models for the drawsheet ingestion tool.

This package contains the domain model classes used throughout the application:
decoded grids, column mappings, row analysis results, export payloads,
configuration and run results.
"""

from .column_export import ColumnExport, ImportStats, ImportType
from .column_mapping import ColumnContentProfile, ColumnMapping, ColumnRole
from .config_models import AppConfig, HeuristicsConfig
from .grid import CellStyle, CellValue, SheetInfo, SpreadsheetData, StyleGrid, WorkbookInfo
from .row_analysis import (
    RowAnalysis,
    RowBoundaries,
    RowClassification,
    RowLabel,
    RowRange,
    RowSignals,
)

__all__ = [
    # Grid models
    "CellStyle",
    "CellValue",
    "SheetInfo",
    "SpreadsheetData",
    "StyleGrid",
    "WorkbookInfo",
    # Column detection
    "ColumnContentProfile",
    "ColumnMapping",
    "ColumnRole",
    # Row detection
    "RowAnalysis",
    "RowBoundaries",
    "RowClassification",
    "RowLabel",
    "RowRange",
    "RowSignals",
    # Import payload
    "ColumnExport",
    "ImportStats",
    "ImportType",
    # Configuration
    "AppConfig",
    "HeuristicsConfig",
]
