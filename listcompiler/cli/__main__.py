from __future__ import annotations

import argparse
import os
import sys
import zipfile
from pathlib import Path

from dotenv import load_dotenv

from listcompiler.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from listcompiler.errors import CompilationError
from listcompiler.logging.init import log_summary, setup_logging
from listcompiler.models.export_bundle import TargetPlatform
from listcompiler.services.orchestrator import compile_workbook
from listcompiler.services.summary import render_summary_line
from listcompiler.services.writer import write_bundle

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (--config > $LISTCOMPILER_CONFIG > config/compile.yml)
- Compile the workbook given on the command line
- Write the export bundle (zip archive by default) and print the SUMMARY line

Exit codes: 0 success, 2 success with warnings, 1 fatal (nothing written).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_WARNINGS = 2

CONFIG_ENV_VAR = "LISTCOMPILER_CONFIG"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; a broken file is reported and ignored."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="listcompiler",
        description="Catalog workbook -> Dimensions list definitions / iField import tables",
    )
    p.add_argument("workbook", type=Path, help="Source catalog workbook (.xlsx)")
    p.add_argument("--config", type=Path, default=None, help="YAML config path")
    p.add_argument(
        "--platform",
        choices=[t.value for t in TargetPlatform],
        default=None,
        help="Target platform (overrides export.platform)",
    )
    p.add_argument("--output-dir", type=Path, default=None, help="Output directory (overrides export.output_directory)")
    p.add_argument("--no-archive", action="store_true", help="Write loose files instead of a zip archive")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(workbook: Path, cfg) -> int:
    from listcompiler.excel.reader import load_sheet, read_workbook

    try:
        frames = read_workbook(workbook)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        print(f"inspect: cannot read workbook: {e}")
        return EXIT_FATAL
    for sname in frames:
        offset = 0 if sname == cfg.index_sheet else cfg.header_row_offset
        rows = load_sheet(frames, sname, offset)
        if not rows:
            print(f"SHEET: {sname} (empty)")
            continue
        header = {k: v for k, v in rows[0].items() if v is not None}
        print(f"SHEET: {sname} header={header}")
        for r in rows[1:4]:
            print("    row=", {k: v for k, v in r.items() if v is not None})
    return EXIT_SUCCESS


def _resolve_config_path(arg: Path | None) -> Path:
    if arg is not None:
        return arg
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        logger.setLevel("DEBUG")
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    config_path = _resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not args.workbook.exists():
        logger.error(f"workbook not found: {args.workbook}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(args.workbook, cfg)

    platform = TargetPlatform(args.platform) if args.platform else None
    logger.info(f"Compiling workbook: {args.workbook}")
    try:
        result = compile_workbook(args.workbook, cfg, platform=platform)
    except CompilationError as e:
        logger.error(f"compile: {e}")
        return EXIT_FATAL

    output_dir = args.output_dir or Path(cfg.export.output_directory)
    archive = cfg.export.archive and not args.no_archive
    try:
        write_bundle(result.bundle, output_dir, archive=archive)
    except OSError as e:
        logger.error(f"write: {e}")
        return EXIT_FATAL

    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.warnings:
        return EXIT_WARNINGS
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
