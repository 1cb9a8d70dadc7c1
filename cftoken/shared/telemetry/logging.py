"""Logging configuration for the command line tool."""

import logging
import sys

from cftoken.core.config import get_settings


def setup_logging(verbose: bool = False) -> None:
    """Configure process-wide logging.

    Level is DEBUG when verbose is requested or settings.debug is True,
    otherwise WARNING so normal command output stays clean.
    Output goes to stderr.
    """
    settings = get_settings()
    log_level = logging.DEBUG if verbose or settings.debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
