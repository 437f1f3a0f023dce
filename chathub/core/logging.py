# chathub/core/logging.py

import logging
import os
import sys


APP_LOGGER = "chathub"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level_name: str | None = None) -> logging.Logger:
    """
    Configure the `chathub` logger hierarchy and return its root.

    - Level comes from `level_name`, else LOG_LEVEL, else INFO
    - Hub, pump and route loggers (`chathub.services.*`, `chathub.api.*`)
      inherit it; nothing outside `chathub` is touched
    - A stdout handler is attached once; when uvicorn has already configured
      the root logger, records propagate to it instead
    """
    level_name = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(level)

    if app_logger.handlers or logging.getLogger().handlers:
        return app_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    app_logger.addHandler(handler)
    app_logger.propagate = False

    return app_logger
