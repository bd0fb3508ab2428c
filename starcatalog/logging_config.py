"""
STARCATALOG Logging Configuration

Provides centralized logging configuration for the star catalog engine:
- Console output with a uniform format
- Rotating file handler with size limits
- Per-catalog log level configuration

Catalog modules log through loggers named "STARCATALOG.<Component>", which
are children of the "STARCATALOG" root configured here.

Usage:
    from starcatalog.logging_config import setup_logging, get_logger

    # Initialize logging at application startup
    setup_logging(log_level="INFO", log_file="starcatalog.log")

    # Get a logger for your module
    logger = get_logger(__name__)
    logger.info("Catalog opened")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# Module-level constants
ROOT_LOGGER_NAME = "STARCATALOG"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5

# Log level mapping for per-catalog configuration
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(
    log_level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[str | Path] = None,
) -> None:
    """Configure logging for the STARCATALOG application.

    Sets up the STARCATALOG root logger with a console handler and an
    optional rotating file handler. Calling it again replaces the handlers.

    Args:
        log_level: Default logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If provided, enables file logging
                  with rotation.

    Example:
        setup_logging(log_level="DEBUG", log_file="/var/log/starcatalog.log")
    """
    level = LOG_LEVELS.get(log_level.upper(), logging.INFO)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Clear any existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # Console goes to stderr, stdout carries command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_DATE_FORMAT)
    )
    root_logger.addHandler(console_handler)

    if log_file:
        from logging.handlers import RotatingFileHandler

        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=DEFAULT_MAX_BYTES,
            backupCount=DEFAULT_BACKUP_COUNT,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module or catalog.

    Returns a child logger under the STARCATALOG namespace for consistent
    configuration inheritance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_catalog_level(catalog_name: str, level: str) -> None:
    """Set log level for a specific catalog component.

    Args:
        catalog_name: Component name as used in the logger (e.g., "Ucac4",
                      "Tycho2", "FileBackend")
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Example:
        set_catalog_level("Ucac4", "DEBUG")  # Trace zone binary searches
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{catalog_name}")
    logger.setLevel(LOG_LEVELS.get(level.upper(), logging.INFO))
