"""Logging configuration module."""

from __future__ import annotations

import logging

from dyntheme.config.settings import get_settings

_NOISY_LOGGERS = ("PIL", "httpx", "httpcore")


def configure_logging(level: str | None = None) -> None:
    """Configure root logger for theming services and scripts.

    Pillow and the HTTP client log every decode and request at DEBUG, so they
    are capped at WARNING regardless of the configured level.
    """

    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
