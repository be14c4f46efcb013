"""Logger hierarchy for the bindings generator.

Library modules ask for a child of the `ktbindgen` logger and never touch
handlers. Only the command line calls `configure_logging`.
"""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "ktbindgen"
_CONSOLE_FORMAT = "[ktbindgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """`get_logger("parser")` is the `ktbindgen.parser` logger."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send generator logs to stderr, and also to `log_file` when given.

    `verbose` lowers the threshold to DEBUG, which reports each declaration
    as it is rendered. Calling this again replaces the earlier handlers.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_handler(logging.StreamHandler(), level, _CONSOLE_FORMAT))
    if log_file is not None:
        logger.addHandler(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT)
        )
    return logger


__all__ = ["configure_logging", "get_logger"]
