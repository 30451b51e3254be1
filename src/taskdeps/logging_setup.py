# src/taskdeps/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


# Loggers that emit one record per row or per query; the log file still gets all of it.
_PER_QUERY_LOGGERS = (
    "taskdeps.tasks.task_store",
    "taskdeps.graph.repository",
    "taskdeps.graph.assembler",
    "taskdeps.graph.path_finder",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow taskdeps logs
    - keep per-row / per-query chatter (store, repository, graph building, path search) off the console unless WARNING+
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - suppress third-party noise unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("taskdeps."):
            if name.startswith(_PER_QUERY_LOGGERS):
                return record.levelno >= logging.WARNING
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdeps",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure logging with:
    - Console handler: readable + filtered
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info). Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskdeps.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
    return log_file
