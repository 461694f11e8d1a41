from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .catalog import SENTINEL_CODE, SENTINEL_LABEL

"""ImportRow model for the iField tabular import format.

The seven core columns come first, followed by the platform metadata
columns. Metadata defaults to empty / "0" except on the "Other (specify)"
sentinel row, which carries the free-text overrides.
"""

__all__ = [
    "ImportRow",
    "CORE_COLUMNS",
    "METADATA_DEFAULTS",
    "SENTINEL_OVERRIDES",
    "IMPORT_COLUMNS",
    "SENTINEL_OBJECT_NAME",
]

CORE_COLUMNS = [
    "Position",
    "Text",
    "Object Name",
    "Group ID",
    "Display As Header",
    "No Filter",
    "Extended Properties",
]

METADATA_DEFAULTS: dict[str, str] = {
    "Image": "",
    "Exclusive": "0",
    "Hidden": "0",
    "Fixed Position": "0",
    "Randomize": "0",
    "Score": "",
    "Filter Expression": "",
    "Open Ended": "0",
    "Open Ended Type": "",
    "Open Ended Min Length": "",
    "Open Ended Max Length": "",
    "Open Ended Required": "0",
    "Visualization": "0",
    "Numeric Min": "",
    "Numeric Max": "",
    "Decimals": "",
    "Tooltip": "",
    "Color": "",
    "Notes": "",
    "Translation Key": "",
}

SENTINEL_OVERRIDES: dict[str, str] = {
    "Exclusive": "1",
    "Fixed Position": "1",
    "Open Ended": "1",
    "Open Ended Type": "Text",
    "Open Ended Max Length": "255",
    "Visualization": "1",
}

IMPORT_COLUMNS = CORE_COLUMNS + list(METADATA_DEFAULTS)

SENTINEL_OBJECT_NAME = f"_{SENTINEL_CODE}"


@dataclass
class ImportRow:
    """Flat record of the iField import sheet.

    position and group_id are assigned by the parser post-pass; rows are
    mutable until then.
    """
    text: str
    object_name: str
    is_header: bool = False
    no_filter: str = "0"
    extended_properties: dict[str, str] = field(default_factory=dict)
    position: int = 0
    group_id: str = ""
    metadata: dict[str, str] = field(default_factory=lambda: dict(METADATA_DEFAULTS))

    @classmethod
    def sentinel(cls) -> ImportRow:
        row = cls(text=SENTINEL_LABEL, object_name=SENTINEL_OBJECT_NAME)
        row.apply_sentinel_overrides()
        return row

    @property
    def code(self) -> str:
        return self.object_name[1:] if self.object_name.startswith("_") else self.object_name

    @property
    def is_sentinel(self) -> bool:
        """Text reads "Other (specify)" (case-insensitive); the code alone does not count."""
        return self.text.strip().lower() == SENTINEL_LABEL.lower()

    @property
    def claims_sentinel_code(self) -> bool:
        """Item row using the reserved sentinel code for some other text."""
        return not self.is_header and self.object_name == SENTINEL_OBJECT_NAME and not self.is_sentinel

    def apply_sentinel_overrides(self) -> None:
        self.metadata.update(SENTINEL_OVERRIDES)

    def to_record(self) -> dict[str, Any]:
        """Return the row as an ordered column -> value mapping."""
        record: dict[str, Any] = {
            "Position": self.position,
            "Text": self.text,
            "Object Name": self.object_name,
            "Group ID": self.group_id,
            "Display As Header": "1" if self.is_header else "0",
            "No Filter": self.no_filter,
            "Extended Properties": json.dumps(self.extended_properties, ensure_ascii=False),
        }
        for column in METADATA_DEFAULTS:
            record[column] = self.metadata.get(column, METADATA_DEFAULTS[column])
        return record
