"""Logging configuration for the app."""

from __future__ import annotations

import logging

from .config import AppConfig

LOGGER_NAME = "swar_app"
PACKAGE_LOGGER_NAME = "swar_player"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(module)s:%(lineno)d | %(funcName)s | %(message)s"


def _route(name: str, *handlers: logging.Handler) -> logging.Logger:
    """Point a named logger at exactly ``handlers``, dropping earlier ones."""
    target = logging.getLogger(name)
    target.setLevel(logging.DEBUG)
    target.propagate = False
    for previous in list(target.handlers):
        target.removeHandler(previous)
        previous.close()
    for handler in handlers:
        target.addHandler(handler)
    return target


def setup_logging(config: AppConfig) -> logging.Logger:
    console = logging.StreamHandler()
    console.setLevel(config.log_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    run_file = logging.FileHandler(config.log_file, encoding="utf-8")
    run_file.setLevel(config.file_log_level)
    run_file.setFormatter(logging.Formatter(FILE_FORMAT))

    app_logger = _route(LOGGER_NAME, console, run_file)
    # Module loggers (swar_player.*) write to the same run file.
    _route(PACKAGE_LOGGER_NAME, console, run_file)

    logging.captureWarnings(True)
    _route("py.warnings", run_file)
    return app_logger
