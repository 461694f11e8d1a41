from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..errors import MalformedBlockError
from ..models.catalog import LOCAL_HEADER_CODE, LOCAL_HEADER_LABEL
from ..models.import_row import SENTINEL_OBJECT_NAME, ImportRow
from .tokenizer import HeaderOpen, Item, Malformed, tokenize

"""Definition text -> ImportRow reduction.

The tokenizer isolates all text matching; this module only turns the token
stream into rows and then runs the two positional sweeps:

1. Position = 1..n in emission order; header positions recorded by object name.
2. Group ID of every non-header row = position of the header whose code is
   floor(code / 100) * 100, or "" when that header was not emitted.

Group membership is positional, not taken from the block nesting, so a row
placed inside the "wrong" block still lands in the group its code implies.
"""

__all__ = [
    "DEFAULT_ALCOHOLIC_HEADER_CODES",
    "MalformedFragment",
    "ParseResult",
    "parse_definition",
    "parent_object_name",
]

logger = logging.getLogger(__name__)

DEFAULT_ALCOHOLIC_HEADER_CODES = frozenset({"800", "900"})

LOCAL_HEADER_OBJECT_NAME = f"_{LOCAL_HEADER_CODE}"


@dataclass(frozen=True)
class MalformedFragment:
    line: int
    fragment: str


@dataclass(frozen=True)
class ParseResult:
    rows: list[ImportRow]
    malformed: list[MalformedFragment] = field(default_factory=list)

    @property
    def header_rows(self) -> list[ImportRow]:
        return [r for r in self.rows if r.is_header]

    @property
    def item_rows(self) -> list[ImportRow]:
        return [r for r in self.rows if not r.is_header]


def parent_object_name(code: str) -> str | None:
    """Object name of the header owning `code` (`_1234` -> `_1200`)."""
    if not code.isdigit():
        return None
    return f"_{(int(code) // 100) * 100}"


def _header_row(code: str, label: str, properties: dict[str, str], alcoholic: frozenset[str]) -> ImportRow:
    return ImportRow(
        text=label,
        object_name=f"_{code}",
        is_header=True,
        no_filter="0" if code in alcoholic else "1",
        extended_properties=dict(properties),
    )


def _item_row(code: str, label: str, properties: dict[str, str]) -> ImportRow:
    row = ImportRow(text=label, object_name=f"_{code}", extended_properties=dict(properties))
    if row.is_sentinel:
        row.apply_sentinel_overrides()
    return row


def _synthesize_fallback(rows: list[ImportRow], alcoholic: frozenset[str]) -> None:
    """Append the local header and the "Other (specify)" row when absent."""
    if not any(r.is_header and r.object_name == LOCAL_HEADER_OBJECT_NAME for r in rows):
        logger.debug("no local header in definition text, appending one")
        rows.append(_header_row(LOCAL_HEADER_CODE, LOCAL_HEADER_LABEL, {}, alcoholic))
    if not any(r.object_name == SENTINEL_OBJECT_NAME and r.is_sentinel for r in rows):
        logger.debug("no 'Other (specify)' row in definition text, appending one")
        rows.append(ImportRow.sentinel())


def _assign_positions(rows: list[ImportRow]) -> None:
    header_positions: dict[str, int] = {}
    for index, row in enumerate(rows, start=1):
        row.position = index
        if row.is_header:
            header_positions.setdefault(row.object_name, index)
    for row in rows:
        if row.is_header:
            row.group_id = ""
            continue
        parent = parent_object_name(row.code)
        position = header_positions.get(parent) if parent else None
        row.group_id = str(position) if position is not None else ""


def parse_definition(
    lines: Iterable[str] | str,
    *,
    alcoholic_header_codes: Iterable[str] = DEFAULT_ALCOHOLIC_HEADER_CODES,
    strict: bool = False,
    synthesize_fallback: bool | None = None,
) -> ParseResult:
    """Parse list-definition text back into ImportRows.

    Args:
        lines: definition text, as one string or as lines
        alcoholic_header_codes: header codes whose rows get No Filter = "0"
        strict: raise MalformedBlockError instead of collecting warnings
        synthesize_fallback: force the local header / "Other (specify)"
            synthesis on or off; None applies it to hierarchical text only
            (at least one header group). Where it applies, an item
            reusing the _1099 code for other text is reported as malformed

    Returns:
        ParseResult with positioned rows and the malformed fragments skipped
    """
    text = lines if isinstance(lines, str) else "\n".join(lines)
    alcoholic = frozenset(alcoholic_header_codes)

    rows: list[ImportRow] = []
    malformed: list[MalformedFragment] = []
    reserved_claims: list[tuple[ImportRow, int]] = []

    def _reject(line: int, fragment: str) -> None:
        if strict:
            raise MalformedBlockError(line, fragment)
        logger.warning(f"skipping malformed fragment at line {line}: {fragment!r}")
        malformed.append(MalformedFragment(line=line, fragment=fragment))

    saw_header = False
    for token in tokenize(text):
        if isinstance(token, HeaderOpen):
            saw_header = True
            rows.append(_header_row(token.code, token.label, token.properties, alcoholic))
        elif isinstance(token, Item):
            row = _item_row(token.code, token.label, token.properties)
            if row.claims_sentinel_code:
                reserved_claims.append((row, token.line))
            rows.append(row)
        elif isinstance(token, Malformed):
            _reject(token.line, token.fragment)

    if synthesize_fallback if synthesize_fallback is not None else saw_header:
        # _1099 belongs to "Other (specify)" wherever the fallback is guaranteed
        for row, line in reserved_claims:
            rows[:] = [r for r in rows if r is not row]
            _reject(line, f'{row.object_name} "{row.text}" uses the reserved "Other (specify)" code')
        _synthesize_fallback(rows, alcoholic)
    _assign_positions(rows)
    return ParseResult(rows=rows, malformed=malformed)
