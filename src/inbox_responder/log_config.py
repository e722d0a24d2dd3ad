"""Structured logging setup."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Looked up per logger so a redirected sys.stderr is honoured.
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog to drop events below ``level``.

    Events go to stderr so CLI output on stdout stays machine-readable.

    Args:
        level: Standard logging level name (DEBUG, INFO, ...).
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(resolved),
        logger_factory=_stderr_logger,
    )
