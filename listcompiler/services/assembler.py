from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence

from ..models.catalog import CatalogList
from ..models.definition import DefinitionBlock
from ..models.export_bundle import Artifact, ArtifactKind, ExportBundle, TargetPlatform
from ..models.import_row import IMPORT_COLUMNS, ImportRow
from ..models.issue_record import IssueRecord
from .definition_parser import DEFAULT_ALCOHOLIC_HEADER_CODES, ParseResult, parse_definition
from .serializer import render_all

"""Export assembly: definition blocks -> named artifact set per platform.

DIMENSIONS: one .txt per list plus ALL_LISTS_<ISO>.txt.
IFIELD:     every block parsed back to ImportRows, de-duplicated by Object
            Name, re-sorted by Position, one .xlsx per list (or one combined
            workbook with a sheet per list), plus optional image captions.
"""

__all__ = [
    "CAPTION_COLUMNS",
    "deduplicate_rows",
    "build_import_rows",
    "caption_rows",
    "assemble",
]

logger = logging.getLogger(__name__)

CAPTION_COLUMNS = ["Object Name", "Caption", "CategoryCode"]

_MARKUP = re.compile(r"<[^>]+>")

MAX_SHEET_NAME = 31


def deduplicate_rows(rows: Iterable[ImportRow]) -> list[ImportRow]:
    """Keep the first row per Object Name, ordered by Position."""
    seen: set[str] = set()
    unique: list[ImportRow] = []
    for row in rows:
        if row.object_name in seen:
            continue
        seen.add(row.object_name)
        unique.append(row)
    return sorted(unique, key=lambda r: r.position)


def build_import_rows(
    blocks: Sequence[DefinitionBlock],
    *,
    alcoholic_header_codes: Iterable[str] = DEFAULT_ALCOHOLIC_HEADER_CODES,
    strict: bool = False,
    issues: list[IssueRecord] | None = None,
    workbook_name: str = "",
) -> dict[str, ParseResult]:
    """Run every block through the definition parser."""
    results: dict[str, ParseResult] = {}
    for block in blocks:
        result = parse_definition(
            block.lines,
            alcoholic_header_codes=alcoholic_header_codes,
            strict=strict,
        )
        if result.malformed:
            logger.warning(f"{block.name}: {len(result.malformed)} malformed fragment(s) skipped")
        if issues is not None:
            for frag in result.malformed:
                issues.append(IssueRecord.create(
                    workbook=workbook_name,
                    list_name=block.name,
                    line=frag.line,
                    issue_type="MALFORMED_BLOCK",
                    message=f"unparseable fragment: {frag.fragment}",
                ))
        results[block.name] = result
    return results


def caption_rows(catalogs: Iterable[CatalogList]) -> list[dict[str, str]]:
    """Caption records for every image entry (label without markup)."""
    records: list[dict[str, str]] = []
    for catalog in catalogs:
        for entry in catalog.entries:
            if not entry.is_image_entry:
                continue
            records.append({
                "Object Name": f"_{entry.code}",
                "Caption": _MARKUP.sub("", entry.label),
                "CategoryCode": ",".join(f"_{c}" for c in entry.category_codes),
            })
    return records


def _selected(block: DefinitionBlock, tabular_lists: Sequence[str] | None, market_code: str) -> bool:
    if tabular_lists is None:
        return True
    return any(block.name in (name, f"{name}_{market_code}") for name in tabular_lists)


def _records(rows: Iterable[ImportRow]) -> list[dict[str, object]]:
    return [row.to_record() for row in deduplicate_rows(rows)]


def _text_artifacts(blocks: Sequence[DefinitionBlock], market_code: str) -> list[Artifact]:
    artifacts = [Artifact(name=f"{b.name}.txt", kind=ArtifactKind.TEXT, text=b.text) for b in blocks]
    artifacts.append(Artifact(
        name=f"ALL_LISTS_{market_code}.txt",
        kind=ArtifactKind.TEXT,
        text=render_all(blocks),
    ))
    return artifacts


def _table_artifacts(
    blocks: Sequence[DefinitionBlock],
    row_sets: Mapping[str, Sequence[ImportRow]],
    market_code: str,
    combined_workbook: bool,
) -> list[Artifact]:
    if combined_workbook:
        sheets = {b.name[:MAX_SHEET_NAME]: _records(row_sets[b.name]) for b in blocks}
        return [Artifact(
            name=f"ALL_LISTS_{market_code}.xlsx",
            kind=ArtifactKind.TABLE,
            sheets=sheets,
            columns=list(IMPORT_COLUMNS),
        )]
    return [
        Artifact(
            name=f"{b.name}.xlsx",
            kind=ArtifactKind.TABLE,
            sheets={b.name[:MAX_SHEET_NAME]: _records(row_sets[b.name])},
            columns=list(IMPORT_COLUMNS),
        )
        for b in blocks
    ]


def assemble(
    blocks: Sequence[DefinitionBlock],
    import_row_sets: Mapping[str, Sequence[ImportRow]] | None,
    platform: TargetPlatform,
    *,
    market_code: str,
    country_name: str,
    catalogs: Sequence[CatalogList] = (),
    combined_workbook: bool = False,
    image_captions: bool = False,
    tabular_lists: Sequence[str] | None = None,
    alcoholic_header_codes: Iterable[str] = DEFAULT_ALCOHOLIC_HEADER_CODES,
    strict: bool = False,
    issues: list[IssueRecord] | None = None,
    workbook_name: str = "",
) -> ExportBundle:
    """Package blocks (text) or their parsed rows (tables) for one platform.

    import_row_sets maps block name -> rows; blocks missing from it (or all
    of them when it is None) are parsed here.
    """
    if platform is TargetPlatform.DIMENSIONS:
        artifacts = _text_artifacts(blocks, market_code)
        return ExportBundle(platform=platform, market_code=market_code, country_name=country_name, artifacts=artifacts)

    selected = [b for b in blocks if _selected(b, tabular_lists, market_code)]
    row_sets: dict[str, Sequence[ImportRow]] = dict(import_row_sets or {})
    missing = [b for b in selected if b.name not in row_sets]
    if missing:
        parsed = build_import_rows(
            missing,
            alcoholic_header_codes=alcoholic_header_codes,
            strict=strict,
            issues=issues,
            workbook_name=workbook_name,
        )
        row_sets.update({name: result.rows for name, result in parsed.items()})

    artifacts = _table_artifacts(selected, row_sets, market_code, combined_workbook)
    if image_captions:
        captions = caption_rows(catalogs)
        if captions:
            artifacts.append(Artifact(
                name=f"IMAGERY_CAPTIONS_{market_code}.xlsx",
                kind=ArtifactKind.TABLE,
                sheets={"Captions": captions},
                columns=list(CAPTION_COLUMNS),
            ))
    return ExportBundle(platform=platform, market_code=market_code, country_name=country_name, artifacts=artifacts)
