"""
FILE: taskflow/logging_setup.py
PURPOSE: Logging configuration for the CLI
EXPORTS:
  - setup_logging(level, log_file) -> None
DEPENDENCIES:
  - logging (stdlib)
  - rich (RichHandler for console output)
NOTES:
  - Library modules only create loggers; handlers are installed here, once,
    by the entry point
  - Console output goes to stderr so --json output on stdout stays clean
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


class _ConsoleNoiseFilter(logging.Filter):
    """Keep taskflow logs; only let third-party records through at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskflow" or record.name.startswith("taskflow."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure logging with:
    - Console handler: rich, stderr, at ``level``, filtered
    - File handler (optional): everything at DEBUG

    Safe to call more than once; handlers installed by an earlier call are
    replaced, handlers installed by anyone else are left alone.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_file else level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        if getattr(h, "_taskflow", False):
            root.removeHandler(h)
            h.close()

    ch = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_path=False,
        rich_tracebacks=False,
    )
    ch.addFilter(_ConsoleNoiseFilter())
    ch._taskflow = True
    root.addHandler(ch)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        fh._taskflow = True
        root.addHandler(fh)

    logging.captureWarnings(True)
