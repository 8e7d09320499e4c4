"""Logging helpers for aliaskit and its demo scripts."""

import logging
import sys
from typing import Optional

from aliaskit.config import ToolkitConfig

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file
        format_string: Custom format string for log messages
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
        handlers=[
            logging.StreamHandler(sys.stdout),
            *([logging.FileHandler(log_file)] if log_file else []),
        ],
    )


def setup_logging_from_config(config: ToolkitConfig) -> None:
    setup_logging(level=config.log_level, log_file=config.log_file)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for the given name (typically __name__).

    The library never installs handlers itself; records go nowhere
    until the application calls setup_logging().
    """
    return logging.getLogger(name)
