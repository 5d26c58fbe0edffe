"""Helper functions and utilities for the package."""

import logging
import pathlib
import sys


def configure_logging(
    app_name: str,
    *,
    level: int | str = logging.INFO,
    fmt_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    file_path: pathlib.Path | None = None,
) -> logging.Logger:
    """Configures and returns a logger for the application.

    Handlers attached by an earlier call for the same `app_name` are removed
    first, so commands may be run repeatedly in one process.

    Args:
        app_name: The name of the application.
        level: The logging level, as a number or a level name.
        fmt_str: The logging format.
        file_path: Optional path to a file to log messages to.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt_str)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging"]
