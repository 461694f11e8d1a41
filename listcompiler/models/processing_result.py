from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .definition import DefinitionBlock
from .export_bundle import ExportBundle
from .issue_record import IssueRecord

"""Compilation result models.

Aggregates everything one run produced: definition blocks, the export
bundle, warnings, and the metrics printed on the SUMMARY line.
"""


@dataclass(frozen=True)
class ListStat:
    """Per-list statistics."""
    list_name: str
    entries: int  # catalog entries or taxonomy categories
    import_rows: int = 0  # parsed rows (iField only)


@dataclass(frozen=True)
class CompilationResult:
    market_code: str
    country_name: str
    blocks: list[DefinitionBlock]
    bundle: ExportBundle
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    list_stats: list[ListStat] = field(default_factory=list)
    warnings: list[IssueRecord] = field(default_factory=list)

    @property
    def total_entries(self) -> int:
        return sum(s.entries for s in self.list_stats)

    @property
    def total_import_rows(self) -> int:
        return sum(s.import_rows for s in self.list_stats)
