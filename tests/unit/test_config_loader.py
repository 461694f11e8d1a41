from __future__ import annotations

from pathlib import Path

import pytest

from listcompiler.config.loader import (
    DEFAULT_COUNTRIES,
    ConfigError,
    default_config,
    load_config,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.index_sheet == "INDEX"
    assert cfg.country_cell == "D5"
    assert cfg.header_row_offset == 2
    assert [c.name for c in cfg.catalog_lists] == [
        "MAIN_BRANDLIST", "DIARY_BRANDLIST", "EQUITY_BRANDLIST", "IMAGERY_BRANDLIST",
    ]
    imagery = cfg.catalog_lists[-1]
    assert (imagery.code_column, imagery.category_start_column, imagery.image_list) == (4, 5, True)
    assert cfg.taxonomy.alcoholic_header_codes == ("800", "900")
    assert cfg.countries == {"Sweden": "SE", "Norway": "NO"}


def test_export_defaults_applied(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.export.platform == "dimensions"
    assert cfg.export.combined_workbook is False
    assert cfg.export.image_captions is False
    assert cfg.export.tabular_lists is None
    assert cfg.export.strict_parsing is False


def test_required_sheets_in_reading_order(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.required_sheets == [
        "INDEX",
        "MAIN BRAND LIST",
        "DIARY BRAND LIST",
        "EQUITY BRAND LIST",
        "IMAGERY",
        "SUB CATEGORY LIST",
        "CONTAINERS",
    ]


def test_countries_default_when_omitted(write_config: Path):
    text = write_config.read_text(encoding="utf-8").split("countries:")[0]
    write_config.write_text(text, encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg.countries == DEFAULT_COUNTRIES
    assert cfg.countries["KENYA"] == "KE"
    assert cfg.countries["Serbia"] == "SB"


def test_integer_alcoholic_codes_are_normalized(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace('["800", "900"]', "[700, 800]")
    write_config.write_text(text, encoding="utf-8")
    assert load_config(write_config).taxonomy.alcoholic_header_codes == ("700", "800")


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError) as e:
        load_config(temp_workdir / "config" / "not_exists.yml")
    assert "config file not found" in str(e.value)


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("catalog_lists: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_missing_required(write_config: Path):
    text = write_config.read_text(encoding="utf-8")
    start = text.index("taxonomy:")
    end = text.index("export:")
    write_config.write_text(text[:start] + text[end:], encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_unknown_platform(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("platform: dimensions", "platform: paper")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_load_config_non_mapping(write_config: Path):
    write_config.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "top level must be a mapping" in str(e.value)


def test_default_config_matches_shipped_file():
    shipped = Path(__file__).resolve().parents[2] / "config" / "compile.yml"
    assert load_config(shipped) == default_config()
