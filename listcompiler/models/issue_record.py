from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""IssueRecord model for the per-run issue log.

One record per warning or fatal error of a compilation run. line=-1 is the
sentinel for issues that are not tied to a line of definition text (missing
sheet, unrecognized country, empty list, ...).
"""

__all__ = [
    "IssueRecord",
]


@dataclass(frozen=True)
class IssueRecord:
    """Structured issue record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        workbook: Source workbook file name
        list_name: List (or sheet) the issue belongs to
        line: Line number in the definition text (1-based), -1 when unknown
        issue_type: Classification in UPPER_SNAKE_CASE format
        message: Human-readable description
    """
    timestamp: str
    workbook: str
    list_name: str
    line: int
    issue_type: str
    message: str

    @staticmethod
    def create(workbook: str, list_name: str, line: int, issue_type: str, message: str) -> IssueRecord:
        """Create a new IssueRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(
            timestamp=ts,
            workbook=workbook,
            list_name=list_name,
            line=line,
            issue_type=issue_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # Fixed key set: dataclass -> dict -> json
        return json.dumps(asdict(self), ensure_ascii=False)
