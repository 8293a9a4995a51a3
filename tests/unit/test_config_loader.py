from __future__ import annotations
import pytest
from pathlib import Path
from drawsheet.config.loader import ConfigError, default_config, load_config
from drawsheet.models.config_models import HeuristicsConfig


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.import_type == "budget"
    assert cfg.log_level == "INFO"
    assert cfg.heuristics == HeuristicsConfig()


def test_load_config_partial_uses_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "partial.yml"
    p.write_text("heuristics:\n  sum_tolerance: 0.05\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.heuristics.sum_tolerance == 0.05
    assert cfg.heuristics.sum_floor == 1000.0
    assert cfg.heuristics.sample_rows == 30
    assert cfg.import_type == "budget"


def test_load_config_empty_file_is_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "empty.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == default_config()


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError) as e:
        load_config(missing)
    assert "config file not found" in str(e.value)


def test_load_config_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "bad.yml"
    p.write_text("heuristics: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(p)
    assert "invalid yaml" in str(e.value)


def test_load_config_top_level_list(temp_workdir: Path):
    p = temp_workdir / "config" / "list.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(p)
    assert "config validation failed" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    # additionalProperties: false
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_draw_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("import_type: budget", "import_type: draw")
    write_config.write_text(text, encoding="utf-8")
    assert load_config(write_config).import_type == "draw"
