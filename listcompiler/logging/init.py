from __future__ import annotations

import logging
import sys

"""Console logging for compile runs.

A run prints one line per event to stdout as `LABEL message`, where LABEL is
DEBUG, INFO, WARN, ERROR, CRITICAL or SUMMARY. SUMMARY (level 25) carries
the single end-of-run metrics line written by the CLI. Services log through
`logging.getLogger(__name__)`, which places them under the `listcompiler`
logger configured here.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "listcompiler"

SUMMARY_LEVEL = 25  # INFO < SUMMARY < WARNING

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach the stdout handler to the `listcompiler` logger.

    Later calls return the logger configured by the first one; the CLI
    raises the level afterwards for --debug.
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level)
    for stale in app_logger.handlers[:]:
        app_logger.removeHandler(stale)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(LabeledFormatter())
    app_logger.addHandler(console)
    # compile output stays on stdout only, never the root handlers
    app_logger.propagate = False

    _logger = app_logger
    return app_logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() rebuilds it."""
    global _logger
    _logger = None
