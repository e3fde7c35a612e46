"""Loguru sink setup for applications embedding the template."""

import sys
from typing import Any, Optional

from loguru import logger

from .config import LoggingSettingsModel, runtime_settings


def configure_logging(
    level: Optional[str] = None,
    sink: Any = sys.stderr,
    settings: Optional[LoggingSettingsModel] = None,
) -> int:
    """
    Replace loguru's default handler with a single formatted sink.

    Library modules only emit through ``loguru.logger``; installing sinks is
    left to the application, which calls this once at startup.

    Returns:
        The loguru handler id of the installed sink.
    """
    settings = settings or runtime_settings.logging
    level = (level or settings.level).upper()
    logger.remove()
    handler_id = logger.add(
        sink,
        level=level,
        format=settings.format,
        colorize=sink in (sys.stderr, sys.stdout),
    )
    logger.info("Logger configured with level: {}", level)
    return handler_id
