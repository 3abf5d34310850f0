"""Logging setup for the store package."""

from __future__ import annotations

import logging
from typing import Optional

from chat_auth_store.config import Settings, get_settings

ROOT_LOGGER_NAME = "chat_auth_store"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    """Configure the package logger once from settings."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.configure()

    def configure(self) -> None:
        level = logging.getLevelName(self.settings.log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(level)
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the package namespace."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
