"""
Logging Configuration Module

All package modules log through logging.getLogger(__name__), so their
records propagate to the "exercise_extraction" logger configured here.
The runner and the API call setup_logging() once at startup; library
users can leave logging alone or attach their own handlers.

Usage:
    from exercise_extraction.logging_config import setup_logging

    setup_logging("DEBUG", log_file=Path("logs/extraction.log"))
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "exercise_extraction"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[int, str]) -> int:
    """
    Turn a level number or name ("debug", "INFO") into a level number.

    Raises:
        ValueError: Unknown level name
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Level number or name (default: INFO)
        log_file: Optional log file; missing parent directories are created
        format_string: Optional custom format string

    Returns:
        The "exercise_extraction" logger
    """
    level = resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package logger.

    Args:
        name: Component name, e.g. "service" or "scripts.extract_exercises".
            Names already inside the package are kept as they are.
    """
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
