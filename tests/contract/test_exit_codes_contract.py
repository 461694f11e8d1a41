from __future__ import annotations

from pathlib import Path

from listcompiler.cli import main as cli_main
from listcompiler.cli.__main__ import EXIT_FATAL, EXIT_SUCCESS, EXIT_WARNINGS
from tests.workbooks import make_workbook

"""Exit code contract: 0 success, 2 success with warnings, 1 fatal."""


def test_exit_code_values():
    assert (EXIT_SUCCESS, EXIT_FATAL, EXIT_WARNINGS) == (0, 1, 2)


def test_exit_code_fatal_missing_config(temp_workdir: Path, sample_workbook: Path, capsys):
    code = cli_main([str(sample_workbook)])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_fatal_missing_workbook(temp_workdir: Path, write_config: Path, capsys):
    code = cli_main([str(temp_workdir / "data" / "nope.xlsx")])
    assert code == 1
    assert "ERROR workbook not found:" in capsys.readouterr().out


def test_exit_code_fatal_compile_error_writes_nothing(temp_workdir: Path, write_config: Path, sample_sheets, capsys):
    sample_sheets["INDEX"][4][3] = "Atlantis"
    path = make_workbook(temp_workdir / "data", "market.xlsx", sample_sheets)
    code = cli_main([str(path)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR compile:" in out and "Atlantis" in out
    assert not (temp_workdir / "output").exists()


def test_exit_code_success(temp_workdir: Path, write_config: Path, sample_workbook: Path, capsys):
    assert cli_main([str(sample_workbook)]) == 0


def test_exit_code_warnings(temp_workdir: Path, write_config: Path, sample_sheets, capsys):
    sample_sheets["SUB CATEGORY LIST"] = sample_sheets["SUB CATEGORY LIST"][:2]
    path = make_workbook(temp_workdir / "data", "market.xlsx", sample_sheets)
    assert cli_main([str(path)]) == 2
