from __future__ import annotations

import pytest

from listcompiler.errors import EmptyListError
from listcompiler.services.catalog_builder import build_catalog_list

HEADER = {"A": "Brand", "B": "Code", "C": "Beer 720", "D": "Cider 721"}


def test_only_flagged_rows_become_entries():
    rows = [
        HEADER,
        {"A": "Carlsberg", "B": "10", "C": "yes", "D": "no"},
        {"A": "Unflagged", "B": "11", "C": "no", "D": "no"},
    ]
    catalog = build_catalog_list(rows, "MAIN_BRANDLIST_SE", code_column=2, category_start_column=3)
    assert catalog.name == "MAIN_BRANDLIST_SE"
    assert len(catalog.entries) == 1
    entry = catalog.entries[0]
    assert entry.code == "10"
    assert entry.label == "Carlsberg"
    assert entry.category_codes == ("720",)
    assert entry.is_image_entry is False


def test_rows_without_label_or_code_are_skipped():
    rows = [
        HEADER,
        {"A": None, "B": "10", "C": "yes"},
        {"A": "No code", "B": None, "C": "yes"},
        {"A": "Somersby", "B": "12", "D": "yes"},
    ]
    catalog = build_catalog_list(rows, "L", 2, 3)
    assert [e.code for e in catalog.entries] == ["12"]


def test_header_row_is_not_an_entry():
    header = {"A": "Brand", "B": "Code", "C": "yes 720"}
    rows = [header, {"A": "Cola", "B": "1", "C": "yes"}]
    catalog = build_catalog_list(rows, "L", 2, 3)
    assert [e.label for e in catalog.entries] == ["Cola"]


def test_image_list_wraps_label_in_bold_markup():
    rows = [
        {"A": "Statement", "D": "Code", "E": "Beer 720"},
        {"A": "Refreshing", "D": "31", "E": "yes"},
    ]
    catalog = build_catalog_list(rows, "IMAGERY_BRANDLIST_SE", 4, 5, is_image_list=True)
    assert catalog.entries[0].label == "<b>Refreshing</b>"
    assert catalog.entries[0].is_image_entry is True


def test_zero_surviving_entries_is_a_hard_failure():
    rows = [HEADER, {"A": "Unflagged", "B": "11", "C": "no"}]
    with pytest.raises(EmptyListError) as e:
        build_catalog_list(rows, "EQUITY_BRANDLIST_SE", 2, 3)
    assert e.value.list_name == "EQUITY_BRANDLIST_SE"


def test_no_rows_at_all_is_empty_list():
    with pytest.raises(EmptyListError):
        build_catalog_list([], "L", 2, 3)


def test_duplicate_code_keeps_first_and_records_issue():
    rows = [
        HEADER,
        {"A": "Carlsberg", "B": "10", "C": "yes"},
        {"A": "Carlsberg Export", "B": "10", "D": "yes"},
    ]
    issues = []
    catalog = build_catalog_list(rows, "L", 2, 3, issues=issues, workbook_name="m.xlsx")
    assert [e.label for e in catalog.entries] == ["Carlsberg"]
    assert len(issues) == 1
    assert issues[0].issue_type == "DUPLICATE_CODE"
    assert issues[0].workbook == "m.xlsx"
