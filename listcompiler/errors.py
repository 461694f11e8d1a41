from __future__ import annotations

"""Fatal error taxonomy for one compilation run.

Every CompilationError aborts the run before any artifact is produced.
Recoverable conditions (empty taxonomy, malformed fragments in lenient
mode) are reported as IssueRecord warnings instead.
"""

__all__ = [
    "CompilationError",
    "MissingSheetError",
    "UnrecognizedCountryError",
    "EmptyListError",
    "MalformedBlockError",
]


class CompilationError(Exception):
    """Base exception for fatal compilation errors."""

    issue_type = "COMPILATION_ERROR"


class MissingSheetError(CompilationError):
    """Raised when a required sheet is absent from the workbook."""

    issue_type = "MISSING_SHEET"

    def __init__(self, sheet_name: str) -> None:
        self.sheet_name = sheet_name
        super().__init__(f"required sheet not found: '{sheet_name}'")


class UnrecognizedCountryError(CompilationError):
    """Raised when the index sheet country has no market code."""

    issue_type = "UNRECOGNIZED_COUNTRY"

    def __init__(self, country: str | None) -> None:
        self.country = country
        super().__init__(f"country not recognized: '{country}'")


class EmptyListError(CompilationError):
    """Raised when a catalog list ends up with zero entries."""

    issue_type = "EMPTY_LIST"

    def __init__(self, list_name: str) -> None:
        self.list_name = list_name
        super().__init__(f"list '{list_name}' produced no entries")


class MalformedBlockError(CompilationError):
    """Raised in strict parsing mode for an unreadable definition fragment."""

    issue_type = "MALFORMED_BLOCK"

    def __init__(self, line: int, fragment: str) -> None:
        self.line = line
        self.fragment = fragment
        super().__init__(f"malformed definition fragment at line {line}: {fragment!r}")
