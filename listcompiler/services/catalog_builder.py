from __future__ import annotations

import logging

from ..errors import EmptyListError
from ..excel.reader import SheetRow, cell_value, column_letter
from ..models.catalog import CatalogEntry, CatalogList
from ..models.issue_record import IssueRecord
from .flags import resolve_codes

"""Catalog list building (brand lists and imagery list).

Rows come from load_sheet: the first row is the column-label header used to
read category codes, every following row is a candidate entry. Column A is
the label; the code sits in a configurable column.
"""

__all__ = [
    "IMAGE_LABEL_TEMPLATE",
    "build_catalog_list",
]

logger = logging.getLogger(__name__)

IMAGE_LABEL_TEMPLATE = "<b>{label}</b>"

LABEL_COLUMN = "A"


def build_catalog_list(
    rows: list[SheetRow],
    list_name: str,
    code_column: int,
    category_start_column: int,
    is_image_list: bool = False,
    issues: list[IssueRecord] | None = None,
    workbook_name: str = "",
) -> CatalogList:
    """Build one catalog list.

    Rows without a label, without a code, or without any flagged category
    are skipped silently. A repeated code keeps its first entry and is
    reported as a DUPLICATE_CODE issue.

    Args:
        rows: header row followed by data rows
        list_name: full list name (market suffix included)
        code_column: 1-based column of the entry code
        category_start_column: 1-based first column of the flag matrix
        is_image_list: wrap labels in the bold markup template
        issues: optional sink for warnings

    Raises:
        EmptyListError: no entry survived
    """
    if not rows:
        raise EmptyListError(list_name)
    header, data = rows[0], rows[1:]
    code_letter = column_letter(code_column)

    entries: list[CatalogEntry] = []
    seen: set[str] = set()
    for row in data:
        label = cell_value(row, LABEL_COLUMN)
        code = cell_value(row, code_letter)
        if not label or not code:
            continue
        code = code.strip()
        category_codes = resolve_codes(header, row, category_start_column)
        if not category_codes:
            continue
        if code in seen:
            logger.warning(f"{list_name}: duplicate code _{code} ('{label}') skipped")
            if issues is not None:
                issues.append(IssueRecord.create(
                    workbook=workbook_name,
                    list_name=list_name,
                    line=-1,
                    issue_type="DUPLICATE_CODE",
                    message=f"duplicate code _{code} for '{label}'",
                ))
            continue
        seen.add(code)
        entries.append(CatalogEntry(
            code=code,
            label=IMAGE_LABEL_TEMPLATE.format(label=label) if is_image_list else label,
            category_codes=category_codes,
            is_image_entry=is_image_list,
        ))

    if not entries:
        raise EmptyListError(list_name)
    logger.debug(f"{list_name}: {len(entries)} entries")
    return CatalogList(name=list_name, entries=tuple(entries))
