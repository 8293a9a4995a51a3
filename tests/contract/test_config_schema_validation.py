from __future__ import annotations

from pathlib import Path

import pytest

from drawsheet.config.loader import ConfigError, load_config

"""Config schema contract: out-of-range and mistyped values are rejected."""


@pytest.mark.parametrize(
    "body",
    [
        "import_type: invoice\n",
        "log_level: TRACE\n",
        "heuristics:\n  sample_rows: 0\n",
        "heuristics:\n  sample_rows: thirty\n",
        "heuristics:\n  min_real_numbers: 0\n",
        "heuristics:\n  sum_tolerance: 0\n",
        "heuristics:\n  sum_tolerance: 1.5\n",
        "heuristics:\n  sum_floor: -1\n",
        "heuristics:\n  weights: {header: 50}\n",
    ],
)
def test_invalid_values_rejected(temp_workdir: Path, body: str):
    p = temp_workdir / "config" / "drawsheet.yml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(p)
    assert str(e.value).startswith("config validation failed")


def test_boundary_values_accepted(temp_workdir: Path):
    p = temp_workdir / "config" / "drawsheet.yml"
    p.write_text("heuristics:\n  sample_rows: 1\n  sum_tolerance: 1\n  sum_floor: 0\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.heuristics.sample_rows == 1
    assert cfg.heuristics.sum_tolerance == 1.0
    assert cfg.heuristics.sum_floor == 0.0
