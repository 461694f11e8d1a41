from __future__ import annotations

import re

from ..excel.reader import SheetRow, cell_value, column_index, ordered_columns

"""Flag matrix resolution.

A flag matrix is a block of columns whose header embeds a numeric code
("Beer 720", "720 - Beer") and whose cells read "yes" when the row's item
belongs to that code.
"""

__all__ = [
    "AFFIRMATIVE",
    "extract_code",
    "is_affirmative",
    "resolve_codes",
]

AFFIRMATIVE = "yes"

_FIRST_INTEGER = re.compile(r"\d+")


def extract_code(header_text: str | None) -> str:
    """First run of digits in a header label, "" when there is none."""
    if not header_text:
        return ""
    m = _FIRST_INTEGER.search(header_text)
    return m.group(0) if m else ""


def is_affirmative(value: str | None) -> bool:
    return value is not None and value.lower() == AFFIRMATIVE


def resolve_codes(header_row: SheetRow, data_row: SheetRow, start_column_index: int) -> tuple[str, ...]:
    """Codes of every flagged column at or after start_column_index (1-based).

    Order follows column order, not numeric order; a code repeated by two
    header columns is kept once, at its first position.
    """
    codes: dict[str, None] = {}
    for letter in ordered_columns(header_row, data_row):
        if column_index(letter) < start_column_index:
            continue
        if not is_affirmative(cell_value(data_row, letter)):
            continue
        code = extract_code(cell_value(header_row, letter))
        if code:
            codes.setdefault(code, None)
    return tuple(codes)
