from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from drawsheet.config.loader import DEFAULT_CONFIG_PATH, ConfigError, default_config, load_config
from drawsheet.logging.init import log_summary, set_level, setup_logging
from drawsheet.models.column_export import ImportType
from drawsheet.models.config_models import AppConfig
from drawsheet.models.processing_result import FileStatus, ProcessingResult
from drawsheet.services.export import prepare_column_export
from drawsheet.services.notifications import Notification, NotificationKind, NotificationRegistry
from drawsheet.services.orchestrator import ProcessingError, process_all
from drawsheet.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the config file (``--config``, ``$DRAWSHEET_CONFIG`` or
  ``config/drawsheet.yml`` when present; built-in defaults otherwise)
- Detect column mapping and data row range for every given workbook
- Optionally print the column export payload of each successful file
- Finish with a SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV_VAR = "DRAWSHEET_CONFIG"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="drawsheet", description="Detect budget/draw columns and data rows in spreadsheets"
    )
    p.add_argument("paths", nargs="+", type=Path, help="Workbook files or directories")
    p.add_argument("--type", dest="import_type", choices=[t.value for t in ImportType], default=None,
                   help="Import type (default from config: budget)")
    p.add_argument("--sheet", default=None, help="Sheet name (default: sheet with most rows)")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--export", action="store_true", help="Print the column export payload as JSON")
    p.add_argument("--project-id", default="", help="Project id for the export payload")
    p.add_argument("--draw-number", type=int, default=None, help="Draw number for draw exports")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    if args.config is not None:
        return load_config(args.config)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()


def _print_exports(result: ProcessingResult, import_type: ImportType, args: argparse.Namespace) -> None:
    for f in result.files:
        if f.status is not FileStatus.SUCCESS or f.detection is None or f.detection.data is None:
            continue
        export = prepare_column_export(
            f.detection.data,
            f.detection.mappings,
            import_type,
            project_id=args.project_id,
            file_name=f.file_name,
            draw_number=args.draw_number,
            row_range=f.detection.boundaries.row_range,
        )
        print(json.dumps(export.to_payload(), ensure_ascii=False, indent=2))


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no argv is given (an empty list means "no args")
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    set_level(logging.DEBUG if args.debug else cfg.log_level)
    logger.debug("debug mode enabled")

    import_type = ImportType(args.import_type or cfg.import_type)

    registry = NotificationRegistry()

    def _report(n: Notification) -> None:
        if n.kind is NotificationKind.ERROR:
            logger.error(f"{n.title}: {n.message}")
        elif n.kind is NotificationKind.WARNING:
            logger.warning(f"{n.title}: {n.message}")

    unsubscribe = registry.subscribe(_report)
    try:
        result = process_all(
            args.paths, sheet_name=args.sheet, config=cfg.heuristics, registry=registry
        )
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL
    finally:
        unsubscribe()

    if args.export:
        _print_exports(result, import_type, args)

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
