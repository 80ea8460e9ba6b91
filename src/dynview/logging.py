"""
Loguru wiring for dynview.

The package disables its own log records on import; applications that want
them call ``setup_logging()``.
"""

import sys
from typing import Optional

from loguru import logger

from .config import get_settings

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(level: Optional[str] = None, sink=sys.stderr) -> int:
    """
    Enable dynview log records and attach a sink.

    Args:
        level: Minimum level; defaults to ``Settings.log_level``.
        sink: Any loguru sink (stream, path, callable).

    Returns:
        The loguru handler id, usable with ``logger.remove``.
    """
    level = (level or get_settings().log_level).upper()
    logger.enable("dynview")
    handler_id = logger.add(
        sink,
        level=level,
        format=LOG_FORMAT,
        filter=lambda record: record["name"].startswith("dynview"),
    )
    logger.debug(f"dynview logging enabled at {level}")
    return handler_id
