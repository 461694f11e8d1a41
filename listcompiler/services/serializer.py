from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from ..models.catalog import (
    LOCAL_HEADER_CODE,
    LOCAL_HEADER_LABEL,
    SENTINEL_CODE,
    SENTINEL_LABEL,
    CatalogEntry,
    CatalogList,
    CategoryNode,
    Taxonomy,
)
from ..models.definition import DefinitionBlock

'''List-definition text rendering.

Pure formatting: no validation happens here. Entries of one block are
separated by a trailing comma on the last line of every entry but the last.
Labels are written as quoted strings with embedded quotes doubled
(`Brand "X"` -> `"Brand ""X"""`) and line breaks folded into one space.
'''

__all__ = [
    "CHILD_INDENT",
    "quote_label",
    "render_catalog_list",
    "render_taxonomy",
    "render_all",
]

CHILD_INDENT = "      "

_LINE_BREAK = re.compile(r"\s*[\r\n]+\s*")


def quote_label(label: str) -> str:
    return '"' + _LINE_BREAK.sub(" ", label).replace('"', '""') + '"'


def _opening(name: str) -> list[str]:
    return [f'{name} "" define', "{"]


def _codes_value(codes: Sequence[str]) -> str:
    return "{_" + ",_".join(codes) + "}"


def _catalog_entry_lines(entry: CatalogEntry) -> list[str]:
    return [
        f"_{entry.code} {quote_label(entry.label)}",
        "[",
        f'{CHILD_INDENT}CategoryCode = "{_codes_value(entry.category_codes)}"',
        "]",
    ]


def _category_lines(code: str, label: str, container_codes: Sequence[str] = ()) -> list[str]:
    lines = [f"{CHILD_INDENT}_{code} {quote_label(label)}"]
    if container_codes:
        lines.append("[")
        lines.append(f'{CHILD_INDENT}ContainersCodes = "{_codes_value(container_codes)}"')
        lines.append("]")
    return lines


def _join_entries(entries: Iterable[list[str]]) -> list[str]:
    chunks = list(entries)
    out: list[str] = []
    for i, chunk in enumerate(chunks):
        if i < len(chunks) - 1:
            chunk = chunk[:-1] + [chunk[-1] + ","]
        out.extend(chunk)
    return out


def _node_lines(node: CategoryNode) -> list[str]:
    return _category_lines(node.code, node.label, node.container_codes)


def render_catalog_list(catalog: CatalogList) -> DefinitionBlock:
    lines = _opening(catalog.name)
    lines += _join_entries(_catalog_entry_lines(e) for e in catalog.entries)
    lines.append("};")
    return DefinitionBlock(name=catalog.name, lines=tuple(lines))


def render_taxonomy(taxonomy: Taxonomy) -> DefinitionBlock:
    """Render header groups, then the fixed local bucket.

    The local bucket is always present and always ends with the
    "Other (specify)" entry, closed with "} fix".
    """
    lines = _opening(taxonomy.name)
    for group in taxonomy.groups:
        lines.append(f"_{group.code} {quote_label(group.label)}")
        lines.append("{")
        lines += _join_entries(_node_lines(n) for n in group.children)
        lines.append("},")
    lines.append(f"_{LOCAL_HEADER_CODE} {quote_label(LOCAL_HEADER_LABEL)}")
    lines.append("{")
    local = [_node_lines(n) for n in taxonomy.local_nodes]
    local.append(_category_lines(SENTINEL_CODE, SENTINEL_LABEL))
    lines += _join_entries(local)
    lines.append("} fix")
    lines.append("};")
    return DefinitionBlock(name=taxonomy.name, lines=tuple(lines))


def render_all(blocks: Sequence[DefinitionBlock]) -> str:
    """Concatenate blocks into the "all lists" text, one blank line between."""
    return "\n\n".join(b.text for b in blocks)
