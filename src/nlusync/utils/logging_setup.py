"""Loguru sink configuration shared by the CLI and library callers."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from nlusync.utils.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
)


def setup_logging(config: LoggingConfig | None = None, *, verbose: bool = False) -> None:
    """Replace the default Loguru sink with console and optional file sinks."""
    config = config or LoggingConfig()
    level = "DEBUG" if verbose else config.level.upper()
    serialize = config.format == "json"

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if config.file:
        target = Path(config.file)
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(target),
            level="DEBUG",
            rotation=config.rotation,
            retention=config.retention,
            serialize=serialize,
        )
