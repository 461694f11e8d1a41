from __future__ import annotations

import logging
import zipfile
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import CompilerConfig
from ..errors import CompilationError, MissingSheetError, UnrecognizedCountryError
from ..excel.reader import cell_at, load_sheet, read_workbook
from ..logging.issue_log import IssueLogBuffer
from ..models.catalog import CatalogList
from ..models.definition import DefinitionBlock
from ..models.export_bundle import TargetPlatform
from ..models.issue_record import IssueRecord
from ..models.processing_result import CompilationResult, ListStat
from .assembler import assemble, build_import_rows, deduplicate_rows
from .catalog_builder import build_catalog_list
from .progress import ListProgressTracker
from .serializer import render_catalog_list, render_taxonomy
from .taxonomy_builder import build_taxonomy

"""Compilation orchestration.

One call = one complete, single-pass compilation of one workbook:

1. read the workbook and check every required sheet is present
2. resolve the market code from the index sheet country
3. build and serialize every catalog list, then the diary taxonomy
4. for iField, parse the text back into ImportRows
5. assemble the export bundle

Any CompilationError aborts the run before a bundle exists; recoverable
issues are collected as warnings and written to the issue log.
"""

logger = logging.getLogger(__name__)


class ProcessingError(CompilationError):
    """The workbook itself could not be read."""

    issue_type = "UNREADABLE_WORKBOOK"


def resolve_country(country: str | None, countries: Mapping[str, str]) -> str:
    """Market code for a country name: exact match, then case-insensitive.

    Raises:
        UnrecognizedCountryError: carries the literal country string
    """
    if country is None:
        raise UnrecognizedCountryError(country)
    name = country.strip()
    if name in countries:
        return countries[name]
    folded = name.casefold()
    for key, code in countries.items():
        if key.casefold() == folded:
            return code
    raise UnrecognizedCountryError(country)


def _check_sheets(available: Mapping[str, object], required: list[str]) -> None:
    for sheet in required:
        if sheet not in available:
            raise MissingSheetError(sheet)


def compile_workbook(
    path: Path,
    config: CompilerConfig,
    *,
    platform: TargetPlatform | None = None,
    issue_log: IssueLogBuffer | None = None,
) -> CompilationResult:
    """Compile one workbook into an export bundle.

    Args:
        path: source workbook (.xlsx)
        config: compiler configuration
        platform: overrides config.export.platform
        issue_log: buffer receiving warnings and the fatal error, if any;
            when omitted a fresh buffer is created and flushed here

    Raises:
        CompilationError: missing sheet, unrecognized country, empty list,
            malformed block (strict mode), unreadable workbook
    """
    start_time = datetime.now(UTC)
    own_log = issue_log is None
    log = issue_log if issue_log is not None else IssueLogBuffer()
    warnings: list[IssueRecord] = []
    target = platform or TargetPlatform(config.export.platform)
    workbook_name = path.name

    try:
        try:
            workbook = read_workbook(path, target_sheets=config.required_sheets)
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            raise ProcessingError(f"cannot read workbook {path}: {e}") from e
        _check_sheets(workbook, config.required_sheets)

        index_rows = load_sheet(workbook, config.index_sheet)
        country = cell_at(index_rows, config.country_cell)
        market_code = resolve_country(country, config.countries)
        logger.info(f"market: {country} ({market_code})")

        blocks: list[DefinitionBlock] = []
        catalogs: list[CatalogList] = []
        stats: dict[str, int] = {}

        with ListProgressTracker(len(config.catalog_lists) + 1) as progress:
            for list_cfg in config.catalog_lists:
                list_name = f"{list_cfg.name}_{market_code}"
                progress.start_list(list_name)
                rows = load_sheet(workbook, list_cfg.sheet, config.header_row_offset)
                catalog = build_catalog_list(
                    rows,
                    list_name,
                    list_cfg.code_column,
                    list_cfg.category_start_column,
                    is_image_list=list_cfg.image_list,
                    issues=warnings,
                    workbook_name=workbook_name,
                )
                catalogs.append(catalog)
                blocks.append(render_catalog_list(catalog))
                stats[list_name] = len(catalog.entries)
                logger.info(f"{list_name}: {len(catalog.entries)} entries")
                progress.finish_list(len(catalog.entries))

            tax_cfg = config.taxonomy
            tax_name = f"{tax_cfg.name}_{market_code}"
            progress.start_list(tax_name)
            taxonomy = build_taxonomy(
                load_sheet(workbook, tax_cfg.category_sheet, config.header_row_offset),
                load_sheet(workbook, tax_cfg.container_sheet, config.header_row_offset),
                tax_name,
                marker=tax_cfg.marker,
                issues=warnings,
                workbook_name=workbook_name,
            )
            blocks.append(render_taxonomy(taxonomy))
            stats[tax_name] = taxonomy.category_count
            logger.info(f"{tax_name}: {len(taxonomy.groups)} header groups, {taxonomy.category_count} categories")
            progress.finish_list(taxonomy.category_count)

        row_counts: dict[str, int] = {}
        row_sets = None
        if target is TargetPlatform.IFIELD:
            parsed = build_import_rows(
                blocks,
                alcoholic_header_codes=tax_cfg.alcoholic_header_codes,
                strict=config.export.strict_parsing,
                issues=warnings,
                workbook_name=workbook_name,
            )
            row_sets = {name: result.rows for name, result in parsed.items()}
            row_counts = {name: len(deduplicate_rows(rows)) for name, rows in row_sets.items()}

        bundle = assemble(
            blocks,
            row_sets,
            target,
            market_code=market_code,
            country_name=country.strip(),
            catalogs=catalogs,
            combined_workbook=config.export.combined_workbook,
            image_captions=config.export.image_captions,
            tabular_lists=config.export.tabular_lists,
            alcoholic_header_codes=tax_cfg.alcoholic_header_codes,
            strict=config.export.strict_parsing,
            issues=warnings,
            workbook_name=workbook_name,
        )
    except CompilationError as e:
        log.extend(warnings)
        log.append(IssueRecord.create(
            workbook=workbook_name,
            list_name=getattr(e, "list_name", None) or getattr(e, "sheet_name", None) or "<WORKBOOK>",
            line=getattr(e, "line", -1),
            issue_type=e.issue_type,
            message=str(e),
        ))
        if own_log:
            log.flush()
        raise

    log.extend(warnings)
    if own_log:
        log.flush()

    end_time = datetime.now(UTC)
    return CompilationResult(
        market_code=market_code,
        country_name=country.strip(),
        blocks=blocks,
        bundle=bundle,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        list_stats=[
            ListStat(list_name=name, entries=count, import_rows=row_counts.get(name, 0))
            for name, count in stats.items()
        ],
        warnings=warnings,
    )
