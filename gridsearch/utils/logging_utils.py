"""
Logging for the gridsearch package.

One stdout handler sits on the ``gridsearch`` logger. Module loggers are its
children and inherit its level, so changing the level in one place (for
example from the CLI) applies to the whole package.
"""

import logging
import sys
from typing import Optional
from gridsearch.config import Config

ROOT_LOGGER = "gridsearch"


def _level(level: Optional[str]) -> int:
    return getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO)


def configure_logging(level: Optional[str] = None, format_string: Optional[str] = None) -> logging.Logger:
    """
    Install the package handler once and set the package level.

    Calling it again only updates the level and, if given, the format.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(format_string or Config.LOG_FORMAT))
        root.addHandler(handler)
    elif format_string:
        for handler in root.handlers:
            handler.setFormatter(logging.Formatter(format_string))
    root.setLevel(_level(level))
    return root


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger for module `name`."""
    if not logging.getLogger(ROOT_LOGGER).handlers:
        configure_logging()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """Change the level for every gridsearch logger."""
    configure_logging(level)
