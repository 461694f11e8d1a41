from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Catalog and taxonomy domain models.

CatalogEntry / CatalogList describe flat brand and imagery lists.
CategoryNode / HeaderGroup / Taxonomy describe the two-level diary
category hierarchy (header group -> category -> container codes).
"""

__all__ = [
    "Bucket",
    "CatalogEntry",
    "CatalogList",
    "CategoryNode",
    "HeaderGroup",
    "Taxonomy",
    "LOCAL_HEADER_CODE",
    "LOCAL_HEADER_LABEL",
    "SENTINEL_CODE",
    "SENTINEL_LABEL",
]

LOCAL_HEADER_CODE = "1000"
LOCAL_HEADER_LABEL = "Local, traditional or other type of drink"
SENTINEL_CODE = "1099"
SENTINEL_LABEL = "Other (specify)"


class Bucket(Enum):
    """Placement of a category node in the taxonomy."""
    NORMAL = "normal"
    LOCAL = "local"


@dataclass(frozen=True)
class CatalogEntry:
    """One brand / imagery entry of a catalog list.

    category_codes keeps source column order; it is never empty for an
    entry that survived list building.
    """
    code: str
    label: str
    category_codes: tuple[str, ...]
    is_image_entry: bool = False


@dataclass(frozen=True)
class CatalogList:
    name: str
    entries: tuple[CatalogEntry, ...]


@dataclass(frozen=True)
class CategoryNode:
    code: str
    label: str
    parent_header_code: str | None
    container_codes: tuple[str, ...] = ()

    @property
    def bucket(self) -> Bucket:
        if self.parent_header_code == LOCAL_HEADER_CODE:
            return Bucket.LOCAL
        return Bucket.NORMAL


@dataclass
class HeaderGroup:
    """Header group created on first sight of its code; children keep row order."""
    code: str
    label: str
    children: list[CategoryNode] = field(default_factory=list)

    @property
    def sort_key(self) -> tuple[int, int, str]:
        # Numeric codes first in numeric order, anything else after them
        if self.code.isdigit():
            return (0, int(self.code), "")
        return (1, 0, self.code)


@dataclass(frozen=True)
class Taxonomy:
    """Built diary taxonomy.

    groups are already sorted by numeric header code. local_nodes are the
    members of the fixed local bucket; the "Other (specify)" sentinel is not
    stored here, the serializer always appends it.
    """
    name: str
    groups: tuple[HeaderGroup, ...]
    local_nodes: tuple[CategoryNode, ...]

    @property
    def category_count(self) -> int:
        return sum(len(g.children) for g in self.groups) + len(self.local_nodes)

    @property
    def is_empty(self) -> bool:
        return self.category_count == 0
