from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""ExportBundle models: the named artifact set handed to the caller."""

__all__ = [
    "TargetPlatform",
    "ArtifactKind",
    "Artifact",
    "ExportBundle",
]


class TargetPlatform(Enum):
    """Target scripting platform.

    - DIMENSIONS: list-definition text files
    - IFIELD: tabular import workbooks built by parsing the text back
    """
    DIMENSIONS = "dimensions"
    IFIELD = "ifield"


class ArtifactKind(Enum):
    TEXT = "text"
    TABLE = "table"


@dataclass(frozen=True)
class Artifact:
    """One output file.

    TEXT artifacts carry `text`; TABLE artifacts carry `sheets`
    (sheet name -> ordered records, all sharing `columns`).
    """
    name: str
    kind: ArtifactKind
    text: str | None = None
    sheets: dict[str, list[dict[str, Any]]] | None = None
    columns: list[str] | None = None

    @property
    def row_count(self) -> int:
        if not self.sheets:
            return 0
        return sum(len(rows) for rows in self.sheets.values())


@dataclass(frozen=True)
class ExportBundle:
    platform: TargetPlatform
    market_code: str
    country_name: str
    artifacts: list[Artifact] = field(default_factory=list)

    @property
    def archive_name(self) -> str:
        return f"CC_PACKAGE_EXPORT_{self.country_name.upper()}_{self.platform.name}.zip"

    def get(self, name: str) -> Artifact:
        for artifact in self.artifacts:
            if artifact.name == name:
                return artifact
        raise KeyError(name)

    def names(self) -> list[str]:
        return [a.name for a in self.artifacts]
