"""
Logging configuration for the feedback board.

Every module logs through loguru's shared ``logger``. The CLI calls
``setup_logging`` once per command to install the sinks.
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ..config import get_settings

LOG_FILE = "logs/feedback_board.log"

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def _sink_options(log_format: str) -> Dict[str, Any]:
    # loguru's serialize mode writes one JSON object per record and ignores format
    if log_format == "json":
        return {"serialize": True}
    return {"format": TEXT_FORMAT}


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Install the stderr sink, plus a rotating file sink outside debug mode.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level = log_level or settings.log_level
    options = _sink_options(settings.log_format)

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        colorize=settings.log_format != "json",
        backtrace=settings.debug_mode,
        diagnose=settings.debug_mode,
        **options,
    )

    if not settings.debug_mode:
        logger.add(
            LOG_FILE,
            level=level,
            rotation="1 day",
            retention="30 days",
            compression="gz",
            backtrace=False,
            diagnose=False,
            **options,
        )

    logger.debug(f"Logging initialized with level: {level}, format: {settings.log_format}")
