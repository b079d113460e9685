"""structlog setup shared by the API process and ad-hoc scripts."""

import logging
import sys
from typing import Optional

import structlog

from olxscraper.config import settings


def configure_logging(level: Optional[str] = None) -> None:
    """Configure stdlib logging and structlog with a console renderer.

    Args:
        level: Log level name; defaults to settings.LOG_LEVEL
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
