from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, HeuristicsConfig

"""Config loader.

Responsibilities:
- Load the YAML config file (``config/drawsheet.yml`` by default)
- Validate it against the bundled JSON schema (unknown keys are rejected)
- Apply defaults for everything the file leaves out
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/drawsheet.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            data fails validation (wrong types, unknown keys, out of range values)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def default_config() -> AppConfig:
    return AppConfig()


def load_config(path: Path) -> AppConfig:
    """Load and validate a YAML config file.

    Raises:
        ConfigError: If the file is missing, is not valid YAML or fails validation
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    defaults = HeuristicsConfig()
    raw = data.get("heuristics") or {}
    heuristics = HeuristicsConfig(
        sample_rows=raw.get("sample_rows", defaults.sample_rows),
        min_real_numbers=raw.get("min_real_numbers", defaults.min_real_numbers),
        sum_tolerance=float(raw.get("sum_tolerance", defaults.sum_tolerance)),
        sum_floor=float(raw.get("sum_floor", defaults.sum_floor)),
    )
    return AppConfig(
        heuristics=heuristics,
        import_type=data.get("import_type", "budget"),
        log_level=data.get("log_level", "INFO"),
    )
