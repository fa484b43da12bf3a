"""Logging setup for the pkgtrust logger hierarchy."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from pkgtrust.config import LOG_DEBUG, LOG_INFO, Settings

LOGGER_NAME = "pkgtrust"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_LEVELS = {
    LOG_INFO: logging.INFO,
    LOG_DEBUG: logging.DEBUG,
}


def configure_logging(settings: Settings, clear: bool = False) -> logging.Logger:
    """Configure the package logger from settings.

    Level 0 silences the logger entirely. Otherwise records go to
    settings.log_file when set, or to stderr through rich.

    Args:
        settings: Process settings.
        clear: Truncate the log file before attaching to it.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = _LEVELS.get(settings.log_level)
    if level is None:
        logger.setLevel(logging.CRITICAL + 1)
        logger.addHandler(logging.NullHandler())
        if clear and settings.log_file:
            clear_log(settings)
        return logger

    logger.setLevel(level)

    handler: logging.Handler
    if settings.log_file:
        if clear:
            clear_log(settings)
        # FileHandler emits each record with a single write under its lock
        handler = logging.FileHandler(settings.log_file, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))

    logger.addHandler(handler)
    return logger


def clear_log(settings: Settings) -> bool:
    """Truncate the configured log file.

    Returns:
        True if a file was truncated, False if none is configured or it doesn't exist.
    """
    if not settings.log_file or not settings.log_file.exists():
        return False
    settings.log_file.write_text("", encoding="utf-8")
    return True
