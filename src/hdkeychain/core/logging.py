"""
Logger factory shared by every hdkeychain module
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

__all__ = ["get_logger", "LOG_LEVEL_ENV", "DEFAULT_LOG_LEVEL"]

LOG_LEVEL_ENV = "HDKEYCHAIN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s]: %(message)s"


def _resolve_level(log_level: Optional[str]) -> int:
    requested = log_level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL
    level = logging.getLevelName(requested.upper())
    # getLevelName returns a string for names it doesn't know
    return level if isinstance(level, int) else logging.getLevelName(DEFAULT_LOG_LEVEL)


def get_logger(name: str, log_level: Optional[str] = None, log_file: Optional[Path] = None,
               format_string: Optional[str] = None) -> logging.Logger:
    """
    Return the named logger, attaching a stdout handler (and a file handler if log_file is given) the first
    time it is requested.

    Args:
        name: Logger name, normally __name__ of the caller
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. When omitted the HDKEYCHAIN_LOG_LEVEL environment
            variable is consulted, then WARNING. Unknown names also give WARNING.
        log_file: Optional path for a persistent log; parent directories are created
        format_string: Optional custom format string

    Returns:
        The configured logger. Later calls with the same name return it unchanged.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(_resolve_level(log_level))
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream=sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
