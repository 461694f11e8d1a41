from __future__ import annotations

import logging

from ..excel.reader import SheetRow, cell_value, ordered_columns
from ..models.catalog import (
    LOCAL_HEADER_CODE,
    SENTINEL_CODE,
    SENTINEL_LABEL,
    CategoryNode,
    HeaderGroup,
    Taxonomy,
)
from ..models.issue_record import IssueRecord
from .flags import extract_code, is_affirmative

"""Diary category taxonomy building.

Category sheet columns:
    A label, B code, C definition text, D parent header label, E parent header code
Container sheet:
    header row embeds category codes; column D of each data row is the
    container code; "yes" in a category column links the container to it.
"""

__all__ = [
    "DEFAULT_MARKER",
    "container_codes_for",
    "build_taxonomy",
]

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "diary"

CONTAINER_CODE_COLUMN = "D"


def container_codes_for(container_rows: list[SheetRow], category_code: str) -> tuple[str, ...]:
    """Container codes flagged "yes" in the column whose header embeds category_code.

    When several header columns embed the same code the right-most one wins.
    """
    if not container_rows:
        return ()
    header, data = container_rows[0], container_rows[1:]
    target: str | None = None
    for letter in ordered_columns(header):
        if extract_code(cell_value(header, letter)) == category_code:
            target = letter
    if target is None:
        return ()
    codes: dict[str, None] = {}
    for row in data:
        if not is_affirmative(cell_value(row, target)):
            continue
        container = cell_value(row, CONTAINER_CODE_COLUMN)
        if container:
            codes.setdefault(container.strip(), None)
    return tuple(codes)


def build_taxonomy(
    category_rows: list[SheetRow],
    container_rows: list[SheetRow],
    list_name: str,
    marker: str = DEFAULT_MARKER,
    issues: list[IssueRecord] | None = None,
    workbook_name: str = "",
) -> Taxonomy:
    """Build the two-level diary taxonomy.

    Only rows whose definition text contains `marker` (case-insensitive) are
    taken. Rows with parent header code 1000 go to the local bucket; others
    are grouped under their header code, groups being created on first
    sight and sorted numerically at the end. A diary row without a parent
    header code is dropped.

    The _1099 "Other (specify)" entry is appended by the serializer, so a
    source row carrying that exact entry is skipped, and a row reusing code
    1099 (or a second "Other (specify)" in the local bucket) is dropped with
    a DUPLICATE_CODE warning.

    An empty result is not an error: the caller still gets a taxonomy that
    serializes to the local bucket plus the "Other (specify)" entry, and an
    EMPTY_TAXONOMY warning is recorded.
    """
    def _issue(issue_type: str, message: str) -> None:
        if issues is not None:
            issues.append(IssueRecord.create(
                workbook=workbook_name,
                list_name=list_name,
                line=-1,
                issue_type=issue_type,
                message=message,
            ))

    groups: dict[str, HeaderGroup] = {}
    local_nodes: list[CategoryNode] = []
    marker_lower = marker.lower()

    for row in category_rows[1:]:
        label = cell_value(row, "A")
        code = cell_value(row, "B")
        definition = cell_value(row, "C")
        header_label = cell_value(row, "D")
        header_code = cell_value(row, "E")
        if not label or not code:
            continue
        if not definition or marker_lower not in definition.lower():
            continue
        code = code.strip()
        if not header_code:
            logger.warning(f"{list_name}: category _{code} ('{label}') has no header code, dropped")
            _issue("UNASSIGNED_CATEGORY", f"category _{code} '{label}' has no parent header code")
            continue
        header_code = header_code.strip()
        is_sentinel_label = label.strip().lower() == SENTINEL_LABEL.lower()
        if code == SENTINEL_CODE and is_sentinel_label:
            logger.debug(f"{list_name}: source row _{code} is the 'Other (specify)' entry, emitted once at the end")
            continue
        if code == SENTINEL_CODE or (is_sentinel_label and header_code == LOCAL_HEADER_CODE):
            logger.warning(f"{list_name}: category _{code} ('{label}') clashes with 'Other (specify)', dropped")
            _issue("DUPLICATE_CODE", f"category _{code} '{label}' clashes with the reserved _{SENTINEL_CODE} 'Other (specify)' entry")
            continue
        node = CategoryNode(
            code=code,
            label=label,
            parent_header_code=header_code,
            container_codes=container_codes_for(container_rows, code),
        )
        if header_code == LOCAL_HEADER_CODE:
            local_nodes.append(node)
            continue
        group = groups.get(header_code)
        if group is None:
            group = HeaderGroup(code=header_code, label=header_label or "")
            groups[header_code] = group
        group.children.append(node)

    taxonomy = Taxonomy(
        name=list_name,
        groups=tuple(sorted(groups.values(), key=lambda g: g.sort_key)),
        local_nodes=tuple(local_nodes),
    )
    if taxonomy.is_empty:
        logger.warning(f"{list_name}: no diary categories found, emitting fallback structure only")
        _issue("EMPTY_TAXONOMY", "no diary categories found")
    else:
        logger.debug(f"{list_name}: {len(taxonomy.groups)} header groups, {taxonomy.category_count} categories")
    return taxonomy
