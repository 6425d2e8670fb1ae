"""
Logging Configuration
Sets up the 'weatherscatter' logger for the application.

The level and an optional log file can be given by the caller or through the
WEATHERSCATTER_LOG_LEVEL / WEATHERSCATTER_LOG_FILE environment variables, so
a running chart can be traced without editing code. Python warnings (numpy
and scipy RuntimeWarnings from the density and tessellation code) are routed
to the same handlers.
"""
import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "weatherscatter"
LEVEL_ENV = "WEATHERSCATTER_LOG_LEVEL"
FILE_ENV = "WEATHERSCATTER_LOG_FILE"

FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def parse_level(value: Union[str, int, None], default: int = logging.INFO) -> int:
    """
    Logging level from a name ("debug", "WARNING") or a number ("10", 10).

    Returns `default` for an empty or unknown value.
    """
    if value is None:
        return default
    if isinstance(value, int):
        return value
    value = value.strip()
    if not value:
        return default
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else default


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger of the 'weatherscatter' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG). Falls back to
            $WEATHERSCATTER_LOG_LEVEL, then INFO.
        log_file: Optional path to also write logs to. Falls back to
            $WEATHERSCATTER_LOG_FILE.

    Returns:
        The configured package logger.
    """
    env_level = os.environ.get(LEVEL_ENV)
    if level is None:
        level = parse_level(env_level)
    log_file = log_file or os.environ.get(FILE_ENV) or None

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # The window may be rebuilt in the same process (tests, restarts)
    warnings_logger = logging.getLogger("py.warnings")
    for handler in list(logger.handlers):
        if handler in warnings_logger.handlers:
            warnings_logger.removeHandler(handler)
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.captureWarnings(True)
    for handler in handlers:
        warnings_logger.addHandler(handler)

    if env_level and parse_level(env_level, default=-1) == -1:
        logger.warning(f"Ignoring unknown {LEVEL_ENV}={env_level!r}.")
    logger.info(f"Logging initialized at {logging.getLevelName(level)}"
                f"{f', writing to {log_file}' if log_file else ''}.")
    return logger
