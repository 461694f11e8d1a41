from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (config/compile.yml by default)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults for every optional key, including the country table
"""

__all__ = [
    "ConfigError",
    "CatalogListConfig",
    "TaxonomyConfig",
    "ExportConfig",
    "CompilerConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_COUNTRIES",
    "SCHEMA_PATH",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_CONFIG_PATH = Path("config/compile.yml")

DEFAULT_COUNTRIES: dict[str, str] = {
    "Austria": "AT",
    "Croatia": "CR",
    "Czechia": "CZ",
    "Denmark": "DK",
    "Finland": "FI",
    "Ireland": "IE",
    "Norway": "NO",
    "Slovakia": "SK",
    "Sweden": "SE",
    "Switzerland": "CH",
    "Hungary": "HU",
    "Nigeria": "NG",
    "Serbia": "SB",
    "Bulgaria": "BG",
    "KENYA": "KE",
    "Greece": "GR",
}

DEFAULTS: dict[str, Any] = {
    "index_sheet": "INDEX",
    "country_cell": "D5",
    "header_row_offset": 9,
    "catalog_lists": [
        {"name": "MAIN_BRANDLIST", "sheet": "MAIN BRAND LIST", "code_column": 2, "category_start_column": 3},
        {"name": "DIARY_BRANDLIST", "sheet": "DIARY BRAND LIST", "code_column": 2, "category_start_column": 3},
        {"name": "EQUITY_BRANDLIST", "sheet": "EQUITY BRAND LIST", "code_column": 2, "category_start_column": 3},
        {"name": "IMAGERY_BRANDLIST", "sheet": "IMAGERY", "code_column": 4, "category_start_column": 5,
         "image_list": True},
    ],
    "taxonomy": {
        "name": "DIARY_CATEGORIES",
        "category_sheet": "SUB CATEGORY LIST",
        "container_sheet": "CONTAINERS",
        "marker": "diary",
        "alcoholic_header_codes": ["800", "900"],
    },
    "export": {
        "platform": "dimensions",
        "output_directory": "./output",
        "combined_workbook": False,
        "image_captions": False,
        "tabular_lists": None,
        "archive": True,
        "strict_parsing": False,
    },
}


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class CatalogListConfig:
    name: str  # base list name, market code is appended at run time
    sheet: str
    code_column: int  # 1-based
    category_start_column: int  # 1-based
    image_list: bool = False


@dataclass(frozen=True)
class TaxonomyConfig:
    name: str
    category_sheet: str
    container_sheet: str
    marker: str = "diary"
    alcoholic_header_codes: tuple[str, ...] = ("800", "900")


@dataclass(frozen=True)
class ExportConfig:
    platform: str = "dimensions"
    output_directory: str = "./output"
    combined_workbook: bool = False
    image_captions: bool = False
    tabular_lists: tuple[str, ...] | None = None  # None = every list
    archive: bool = True
    strict_parsing: bool = False


@dataclass(frozen=True)
class CompilerConfig:
    index_sheet: str
    country_cell: str
    header_row_offset: int
    catalog_lists: tuple[CatalogListConfig, ...]
    taxonomy: TaxonomyConfig
    export: ExportConfig
    countries: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COUNTRIES))

    @property
    def required_sheets(self) -> list[str]:
        """Every sheet a run reads, in reading order, without repeats."""
        names = [self.index_sheet]
        names += [c.sheet for c in self.catalog_lists]
        names += [self.taxonomy.category_sheet, self.taxonomy.container_sheet]
        return list(dict.fromkeys(names))


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or validation failure
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


def _build(data: dict[str, Any]) -> CompilerConfig:
    lists = tuple(
        CatalogListConfig(
            name=item["name"],
            sheet=item["sheet"],
            code_column=item["code_column"],
            category_start_column=item["category_start_column"],
            image_list=item.get("image_list", False),
        )
        for item in data["catalog_lists"]
    )
    tax_raw = {**DEFAULTS["taxonomy"], **data["taxonomy"]}
    taxonomy = TaxonomyConfig(
        name=tax_raw["name"],
        category_sheet=tax_raw["category_sheet"],
        container_sheet=tax_raw["container_sheet"],
        marker=tax_raw["marker"],
        alcoholic_header_codes=tuple(str(c) for c in tax_raw["alcoholic_header_codes"]),
    )
    exp_raw = {**DEFAULTS["export"], **(data.get("export") or {})}
    tabular = exp_raw["tabular_lists"]
    export = ExportConfig(
        platform=exp_raw["platform"],
        output_directory=exp_raw["output_directory"],
        combined_workbook=exp_raw["combined_workbook"],
        image_captions=exp_raw["image_captions"],
        tabular_lists=tuple(tabular) if tabular is not None else None,
        archive=exp_raw["archive"],
        strict_parsing=exp_raw["strict_parsing"],
    )
    return CompilerConfig(
        index_sheet=data.get("index_sheet", DEFAULTS["index_sheet"]),
        country_cell=data.get("country_cell", DEFAULTS["country_cell"]),
        header_row_offset=data.get("header_row_offset", DEFAULTS["header_row_offset"]),
        catalog_lists=lists,
        taxonomy=taxonomy,
        export=export,
        countries=dict(data.get("countries") or DEFAULT_COUNTRIES),
    )


def default_config() -> CompilerConfig:
    """Built-in configuration (same values as the shipped config/compile.yml)."""
    return _build(DEFAULTS)


def load_config(path: Path) -> CompilerConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return _build(data)
