"""
Logging Configuration

Console logging goes to stderr so stdout carries only the JSON a command
prints. A log file, when given, gets everything at DEBUG level regardless
of the console level.
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "storefront_importer"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s " + LOG_FORMAT

# HTTP libraries log every connection at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def setup_logging(verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure the storefront_importer logger.

    Args:
        verbose: Console level DEBUG
        quiet: Console level WARNING
        log_file: Optional path for a full DEBUG log of the run
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(console)
    logger.setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
