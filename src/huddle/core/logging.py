"""Logging configuration for the Huddle service."""

from __future__ import annotations

import logging
import sys

from huddle.core.settings import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(config: Settings) -> logging.Logger:
    """Configure the root logger once at application startup.

    Session tokens and passwords must never be passed to a logger; user ids
    are fine.
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Third-party loggers are noisy at INFO.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not config.sql_debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = logging.getLogger("huddle")
    logger.info("Logging configured at %s", logging.getLevelName(level))
    return logger
