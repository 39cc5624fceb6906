"""Logging configuration for the middleware lab."""

from __future__ import annotations

import logging
import sys

from middleware_lab.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configure the package loggers to write to stdout."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)

    root = logging.getLogger("middleware_lab")
    root.setLevel(level)
    if not any(getattr(h, "_middleware_lab", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._middleware_lab = True  # type: ignore[attr-defined]
        root.addHandler(handler)
