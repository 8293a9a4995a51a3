from __future__ import annotations

import re
from pathlib import Path
from unittest.mock import patch

from drawsheet.cli import main as cli_main

"""Exit code contract: 0 all files detected, 2 some file failed, 1 fatal."""


def test_exit_code_fatal_config(temp_workdir: Path, budget_workbook: Path, capsys):
    code = cli_main([str(budget_workbook), "--config", str(temp_workdir / "config" / "absent.yml")])
    captured = capsys.readouterr()
    assert code == 1
    assert "ERROR config: config file not found" in captured.out


def test_exit_code_fatal_missing_input(temp_workdir: Path, capsys):
    code = cli_main([str(temp_workdir / "nothing_here")])
    assert code == 1
    assert "ERROR processing:" in capsys.readouterr().out


def test_exit_code_all_success(temp_workdir: Path, make_excel, budget_rows, capsys):
    headers = ["Cost Code", "Description", "Budgeted Amount"]
    make_excel("a.xlsx", {"Budget": [headers] + budget_rows})
    make_excel("b.xlsx", {"Budget": [headers] + budget_rows})
    code = cli_main([str(temp_workdir / "data")])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY files=2 success=2 failed=0 rows=40" in out


def test_exit_code_partial_failure(temp_workdir: Path, budget_workbook: Path, capsys):
    (temp_workdir / "data" / "failure.xlsx").write_bytes(b"")

    code = cli_main([str(temp_workdir / "data")])
    out = capsys.readouterr().out

    assert code == 2
    assert "SUMMARY files=2" in out
    match = re.search(r"failed=(\d+)", out)
    assert match is not None, f"No 'failed=' found in output: {out}"
    assert int(match.group(1)) == 1
    assert "ERROR failure.xlsx: import blocked:" in out


def test_exit_code_all_failed_is_partial(temp_workdir: Path, budget_workbook: Path, capsys):
    with patch("drawsheet.services.orchestrator.get_workbook_info", side_effect=OSError("disk gone")):
        code = cli_main([str(budget_workbook)])
    out = capsys.readouterr().out
    assert code == 2
    assert "SUMMARY files=1 success=0 failed=1 rows=0" in out
