from __future__ import annotations

from ..models.processing_result import CompilationResult

"""SUMMARY line of a compile run."""


def _format_seconds(value: float) -> str:
    """Shortest plain decimal for the elapsed time: 0, 2, 1.5, 0.0012."""
    if value == int(value):
        return str(int(value))
    digits = 6 if value < 0.01 else 3
    return f"{value:.{digits}f}".rstrip("0").rstrip(".")


def render_summary_line(result: CompilationResult) -> str:
    """Render the SUMMARY line of one run.

    Format:
    SUMMARY market={iso} platform={platform} lists={n} entries={n} rows={n}
    warnings={n} artifacts={n} elapsed_sec={s}

    entries counts catalog entries plus taxonomy categories; rows counts
    parsed ImportRows and stays 0 for the dimensions platform.
    """
    fields = {
        "market": result.market_code,
        "platform": result.bundle.platform.value,
        "lists": len(result.blocks),
        "entries": result.total_entries,
        "rows": result.total_import_rows,
        "warnings": len(result.warnings),
        "artifacts": len(result.bundle.artifacts),
        "elapsed_sec": _format_seconds(result.elapsed_seconds),
    }
    return "SUMMARY " + " ".join(f"{key}={value}" for key, value in fields.items())
