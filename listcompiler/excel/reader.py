from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils import column_index_from_string, get_column_letter

from ..errors import MissingSheetError

"""Workbook reader and sheet table normalization.

Sheets are read without a header and with every cell as text, then turned
into SheetRow mappings keyed by column letter (A, B, ... AA), the way the
catalog workbook addresses its columns. Literal strings such as "NA" or
"None" are brand names here, so pandas' default NaN conversion is disabled.
"""

__all__ = [
    "SheetRow",
    "read_workbook",
    "load_sheet",
    "cell_value",
    "cell_at",
    "column_letter",
    "column_index",
    "ordered_columns",
]

SheetRow = dict[str, str | None]

_CELL_REF = re.compile(r"^([A-Za-z]+)([0-9]+)$")


def column_letter(index: int) -> str:
    """1-based column index -> letter (1 -> A, 27 -> AA)."""
    return get_column_letter(index)


def column_index(letter: str) -> int:
    """Column letter -> 1-based index."""
    return column_index_from_string(letter)


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read a workbook returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    path: workbook path (.xlsx)
    target_sheets: restrict to these sheet names (None = every sheet)
    """
    wanted = set(target_sheets) if target_sheets is not None else None
    frames: dict[str, pd.DataFrame] = {}
    with pd.ExcelFile(path) as xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            frames[str(name)] = xls.parse(name, header=None, dtype=str, keep_default_na=False)
    return frames


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    text = str(value)
    if text.strip() == "":
        return None
    return text


def _frame_rows(df: pd.DataFrame) -> list[SheetRow]:
    letters = [column_letter(i + 1) for i in range(df.shape[1])]
    rows: list[SheetRow] = []
    for raw in df.itertuples(index=False, name=None):
        rows.append({letter: _to_text(val) for letter, val in zip(letters, raw, strict=False)})
    return rows


def _is_blank(row: SheetRow) -> bool:
    return all(v is None for v in row.values())


def load_sheet(workbook: dict[str, pd.DataFrame], sheet_name: str, header_row_offset: int = 0) -> list[SheetRow]:
    """Normalize one sheet into an ordered list of SheetRow.

    With header_row_offset > 0 the row at index header_row_offset - 1 is the
    column-label header: it becomes the first element, every row before it
    is discarded and every row after it is kept. Fully blank data rows are
    dropped; the header row is always kept. Without an offset the rows come
    back unshifted, blank rows included, so A1 references stay valid.

    Raises:
        MissingSheetError: sheet_name is not in the workbook
    """
    if sheet_name not in workbook:
        raise MissingSheetError(sheet_name)
    rows = _frame_rows(workbook[sheet_name])
    if header_row_offset <= 0:
        return rows
    header_index = header_row_offset - 1
    if header_index >= len(rows):
        # Sheet shorter than the title block: no header, no data
        return []
    header = rows[header_index]
    data = [r for r in rows[header_row_offset:] if not _is_blank(r)]
    return [header, *data]


def cell_value(row: SheetRow | None, column: str) -> str | None:
    """Cell text at column, None for anything not populated."""
    if row is None:
        return None
    return row.get(column)


def cell_at(rows: list[SheetRow], reference: str) -> str | None:
    """Read an A1-style reference (e.g. "D5") from an unshifted sheet."""
    m = _CELL_REF.match(reference.strip())
    if not m:
        raise ValueError(f"invalid cell reference: {reference!r}")
    column, row_number = m.group(1).upper(), int(m.group(2))
    if row_number < 1 or row_number > len(rows):
        return None
    return cell_value(rows[row_number - 1], column)


def ordered_columns(*rows: SheetRow | None) -> list[str]:
    """Union of the rows' column letters in column order."""
    letters: set[str] = set()
    for row in rows:
        if row:
            letters.update(row.keys())
    return sorted(letters, key=column_index)
