"""Logging setup shared by the CLI entry points."""

import logging
from pathlib import Path
from typing import Optional

# Config log levels -> stdlib levels
LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def to_logging_level(level: Optional[str]) -> int:
    """Map a config log level ("warn", "fatal", ...) to a stdlib level."""
    if not level:
        return logging.INFO
    return LOG_LEVELS.get(level.lower(), logging.INFO)


def apply_log_level(level: Optional[str]) -> None:
    """Change the level of the root logger at runtime."""
    logging.getLogger().setLevel(to_logging_level(level))


def configure_logging(
    level: Optional[str] = "info",
    log_file: Optional[Path] = None,
    console_level: int = logging.WARNING,
) -> None:
    """Configure the root logger.

    File handler records everything at ``level``; the console handler only
    shows warnings and above so log lines do not interleave with action output.

    Args:
        level: Config log level for the root logger
        log_file: Optional log file path
        console_level: Minimum level printed to stderr
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(to_logging_level(level))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)
