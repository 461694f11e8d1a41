from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pandas as pd

from listcompiler.cli import main as cli_main

"""End-to-end runs of the CLI against a real workbook on disk."""


def test_run_dimensions_archive(temp_workdir: Path, write_config: Path, sample_workbook: Path, capsys):
    code = cli_main([str(sample_workbook)])
    out = capsys.readouterr().out
    assert code == 0, out

    archive = temp_workdir / "output" / "CC_PACKAGE_EXPORT_SWEDEN_DIMENSIONS.zip"
    assert archive.exists()
    with zipfile.ZipFile(archive) as zf:
        names = zf.namelist()
        assert sorted(names) == sorted([
            "MAIN_BRANDLIST_SE.txt",
            "DIARY_BRANDLIST_SE.txt",
            "EQUITY_BRANDLIST_SE.txt",
            "IMAGERY_BRANDLIST_SE.txt",
            "DIARY_CATEGORIES_SE.txt",
            "ALL_LISTS_SE.txt",
        ])
        all_lists = zf.read("ALL_LISTS_SE.txt").decode("utf-8")
    assert all_lists.startswith('MAIN_BRANDLIST_SE "" define')
    assert all_lists.rstrip().endswith("};")
    assert all_lists.count(" define") == 5
    assert "SUMMARY market=SE platform=dimensions lists=5 entries=11 rows=0 warnings=0 artifacts=6" in out


def test_run_ifield_loose_files(temp_workdir: Path, write_config: Path, sample_workbook: Path, capsys):
    out_dir = temp_workdir / "export"
    code = cli_main([
        str(sample_workbook), "--platform", "ifield", "--no-archive", "--output-dir", str(out_dir),
    ])
    out = capsys.readouterr().out
    assert code == 0, out
    assert sorted(p.name for p in out_dir.iterdir()) == sorted([
        "MAIN_BRANDLIST_SE.xlsx",
        "DIARY_BRANDLIST_SE.xlsx",
        "EQUITY_BRANDLIST_SE.xlsx",
        "IMAGERY_BRANDLIST_SE.xlsx",
        "DIARY_CATEGORIES_SE.xlsx",
    ])
    df = pd.read_excel(out_dir / "DIARY_CATEGORIES_SE.xlsx", sheet_name="DIARY_CATEGORIES_SE", dtype=str)
    assert list(df["Object Name"]) == ["_100", "_102", "_101", "_200", "_201", "_1000", "_1001", "_1099"]
    assert list(df["Position"]) == [str(i) for i in range(1, 9)]
    assert "rows=15" in out


def test_run_ifield_combined_with_captions(temp_workdir: Path, write_config: Path, sample_workbook: Path, capsys):
    text = write_config.read_text(encoding="utf-8").replace(
        "  platform: dimensions\n",
        "  platform: ifield\n  combined_workbook: true\n  image_captions: true\n",
    )
    write_config.write_text(text, encoding="utf-8")
    code = cli_main([str(sample_workbook)])
    assert code == 0, capsys.readouterr().out

    archive = temp_workdir / "output" / "CC_PACKAGE_EXPORT_SWEDEN_IFIELD.zip"
    with zipfile.ZipFile(archive) as zf:
        assert sorted(zf.namelist()) == ["ALL_LISTS_SE.xlsx", "IMAGERY_CAPTIONS_SE.xlsx"]
        combined = pd.read_excel(io.BytesIO(zf.read("ALL_LISTS_SE.xlsx")), sheet_name=None)
        captions = pd.read_excel(io.BytesIO(zf.read("IMAGERY_CAPTIONS_SE.xlsx")), sheet_name="Captions")
    assert list(combined) == [
        "MAIN_BRANDLIST_SE",
        "DIARY_BRANDLIST_SE",
        "EQUITY_BRANDLIST_SE",
        "IMAGERY_BRANDLIST_SE",
        "DIARY_CATEGORIES_SE",
    ]
    assert list(captions["Caption"]) == ["Refreshing", "Premium"]


def test_run_with_warnings_exits_2(temp_workdir: Path, write_config: Path, sample_sheets, capsys):
    from tests.workbooks import make_workbook

    sample_sheets["DIARY BRAND LIST"].append(["Carlsberg Export", 10, "yes", "no"])
    path = make_workbook(temp_workdir / "data", "market.xlsx", sample_sheets)
    code = cli_main([str(path)])
    out = capsys.readouterr().out
    assert code == 2
    assert "warnings=1" in out
    assert (temp_workdir / "output" / "CC_PACKAGE_EXPORT_SWEDEN_DIMENSIONS.zip").exists()
    assert list((temp_workdir / "logs").glob("issues-*.log"))


def test_run_config_from_env_file(temp_workdir: Path, write_config: Path, sample_workbook: Path, monkeypatch, capsys):
    alt = temp_workdir / "config" / "alt.yml"
    alt.write_text(
        write_config.read_text(encoding="utf-8").replace("./output", "./alt-output"),
        encoding="utf-8",
    )
    monkeypatch.setenv("LISTCOMPILER_CONFIG", "config/compile.yml")
    (temp_workdir / ".env").write_text("LISTCOMPILER_CONFIG=config/alt.yml\n", encoding="utf-8")
    assert cli_main([str(sample_workbook)]) == 0
    assert (temp_workdir / "alt-output" / "CC_PACKAGE_EXPORT_SWEDEN_DIMENSIONS.zip").exists()


def test_inspect_data(temp_workdir: Path, write_config: Path, sample_workbook: Path, capsys):
    code = cli_main([str(sample_workbook), "--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SHEET: MAIN BRAND LIST" in out
    assert "'B': 'Code'" in out
    assert not (temp_workdir / "output").exists()
