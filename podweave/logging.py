"""Logging helpers shared by the podweave pipeline."""

from __future__ import annotations

import logging
from typing import Optional, TextIO

_LOGGER_NAME = "podweave"


class _DiagnosticFormatter(logging.Formatter):
    """Plain ``podweave: message`` lines for warnings, detailed lines for debugging."""

    def __init__(self, verbose: bool) -> None:
        super().__init__()
        self.verbose = verbose

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self.verbose:
            return f"[{_LOGGER_NAME}] {record.levelname} {record.name}: {message}"
        return f"{_LOGGER_NAME}: {message}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger under the podweave hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """Send podweave diagnostics to stderr.

    stdout carries the woven POD, so only warnings are shown unless ``verbose``
    asks for the per-file pipeline trace.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(_DiagnosticFormatter(verbose))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
