"""Debug-log setup shared by the CLI and the pytest fixtures."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logger(
    debug_file: Path | None,
    verbose: bool = False,
    logger_name: str = "realm_testkit_cli",
) -> logging.Logger:
    """Return a fresh DEBUG logger writing to ``debug_file`` and, if verbose, stderr.

    Controller and HTTP messages for one run go to this logger, so every run
    needs its own name: a logger that already has handlers is refused with
    RuntimeError rather than silently sharing its output.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        raise RuntimeError(
            f"Logger '{logger_name}' already exists with handlers attached; "
            "pick a distinct logger_name for each run"
        )

    logger.disabled = False
    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if debug_file is not None:
        debug_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(debug_file, mode="a", encoding="utf-8"))
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def release_logger(logger: logging.Logger) -> None:
    """Detach and close the handlers added by setup_logger()."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
