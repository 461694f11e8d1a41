# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from listcompiler.logging.init import reset_logging
from tests.workbooks import SAMPLE_CONFIG_YAML, SAMPLE_SHEETS, make_workbook


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("LISTCOMPILER_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return SAMPLE_CONFIG_YAML


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "compile.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_sheets() -> dict[str, list[list[object]]]:
    return {name: [list(r) for r in rows] for name, rows in SAMPLE_SHEETS.items()}


@pytest.fixture()
def sample_workbook(temp_workdir: Path, sample_sheets) -> Path:
    return make_workbook(temp_workdir / "data", "market.xlsx", sample_sheets)


@pytest.fixture()
def frames(sample_sheets) -> dict[str, pd.DataFrame]:
    """In-memory workbook (sheet name -> raw DataFrame) without touching disk."""
    return {name: pd.DataFrame(rows) for name, rows in sample_sheets.items()}
