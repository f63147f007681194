# src/sister_sync/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "sistersync.log"

# Chatty client libraries; capped at WARNING everywhere, ERROR on the console.
_THIRD_PARTY_QUIET = ("httpx", "httpcore", "openai")

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _is_own_logger(name: str) -> bool:
    return name == "sister_sync" or name.startswith("sister_sync.")


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the REPL readable: our records pass, everything else only at ERROR."""

    def filter(self, record: logging.LogRecord) -> bool:
        return _is_own_logger(record.name) or record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/sistersync",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Point the root logger at stderr (filtered) and at <log_dir>/sistersync.log.

    Replaces whatever handlers the root logger had, so a second call does not
    double every line. Returns the log file path.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    # warnings.warn() lands under "py.warnings", which the console filter hides below ERROR.
    logging.captureWarnings(True)

    for name in _THIRD_PARTY_QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
