"""
Logging Utility
"""

import logging
import sys
from pathlib import Path

ROOT_LOGGER = "membrane_topology"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = ROOT_LOGGER,
    level: int = logging.INFO,
    log_file: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configures and returns a logger.

    Args:
        name: Name of the logger.
        level: Logging level (e.g., logging.INFO, logging.DEBUG).
        log_file: Optional path to a log file. If provided, logs will be written here.
        console: Whether to output logs to the console (stderr, so stdout
            stays free for results).

    Returns:
        logging.Logger: A configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove any existing handlers to avoid duplicate logs
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def level_from_verbosity(verbose: bool = False, quiet: bool = False) -> int:
    """Map CLI verbosity flags to a logging level"""
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbose else logging.INFO


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Retrieves a logger below the package root logger.

    Handlers live on the root logger only; child loggers propagate to it.
    The root logger is set up with defaults the first time it is needed.

    Args:
        name: Name of the logger, e.g. "membrane_topology.AnvilMethod".

    Returns:
        logging.Logger: The requested logger instance.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        setup_logger(ROOT_LOGGER)
    return logging.getLogger(name)


class LogMixin:
    """A mixin class that provides a convenient logger property to its subclasses."""

    @property
    def logger(self) -> logging.Logger:
        """Returns a logger named after the class using this mixin."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(f"{ROOT_LOGGER}.{self.__class__.__name__}")
        return self._logger
