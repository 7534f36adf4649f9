"""
Package logger.

All modules import ``logger`` from here instead of calling ``logging.getLogger``
themselves, so handler/level setup happens in one place.
"""

from __future__ import annotations

import logging

from idp_discovery.config.settings import config

LOGGER_NAME = "idp_discovery"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _setup_logger() -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    level = logging.getLevelName(config.log_level)
    log.setLevel(level if isinstance(level, int) else logging.INFO)
    return log


logger = _setup_logger()

__all__ = ["logger", "LOGGER_NAME"]
