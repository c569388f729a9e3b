"""Centralized logging configuration."""

import logging
from typing import Dict

from weather_dashboard.config import DEBUG

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _library_levels(level: int) -> Dict[str, int]:
    """Levels for the server and HTTP client loggers both services use.

    httpx logs one INFO line per request, which doubles every proxied
    lookup, so it only speaks at DEBUG or on warnings.
    """
    return {
        "uvicorn": level,
        "uvicorn.error": level,
        "uvicorn.access": level,
        "httpx": level if level <= logging.DEBUG else logging.WARNING,
        "httpcore": logging.INFO if level <= logging.DEBUG else logging.WARNING,
    }


def configure_logging(level: int = logging.DEBUG if DEBUG else logging.INFO):
    """
    Configure one log format for the dashboard service, the weather backend
    and the dashboard model.

    Args:
        level: Level for the root logger and the weather_dashboard package
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("weather_dashboard").setLevel(level)

    for logger_name, logger_level in _library_levels(level).items():
        logger = logging.getLogger(logger_name)
        logger.setLevel(logger_level)

        # uvicorn installs its own handlers; route everything through root
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.propagate = True
