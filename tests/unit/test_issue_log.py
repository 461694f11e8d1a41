from __future__ import annotations

import json
import re
from pathlib import Path

from listcompiler.logging.issue_log import IssueLogBuffer
from listcompiler.models.issue_record import IssueRecord


def _record(issue_type: str = "EMPTY_TAXONOMY") -> IssueRecord:
    return IssueRecord.create(
        workbook="market.xlsx",
        list_name="DIARY_CATEGORIES_SE",
        line=-1,
        issue_type=issue_type,
        message="no diary categories found",
    )


def test_issue_record_json_line_has_fixed_keys():
    data = json.loads(_record().to_json_line())
    assert list(data) == ["timestamp", "workbook", "list_name", "line", "issue_type", "message"]
    assert data["timestamp"].endswith("Z")
    assert data["line"] == -1


def test_flush_empty_buffer_writes_nothing(tmp_path: Path):
    buf = IssueLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_flush_writes_json_lines(tmp_path: Path):
    buf = IssueLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(_record())
    buf.extend([_record("DUPLICATE_CODE"), _record("MALFORMED_BLOCK")])
    assert len(buf) == 3

    path = buf.flush()
    assert path is not None
    assert re.fullmatch(r"issues-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["issue_type"] for line in lines] == [
        "EMPTY_TAXONOMY", "DUPLICATE_CODE", "MALFORMED_BLOCK",
    ]
    assert len(buf) == 0


def test_second_flush_appends_to_same_file(tmp_path: Path):
    buf = IssueLogBuffer(logs_dir=tmp_path)
    buf.append(_record())
    first = buf.flush()
    buf.append(_record())
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2
