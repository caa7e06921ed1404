"""
Logging helpers shared by the deployer packages.
"""

import logging
import sys
from logging import Logger

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s (%(filename)s:%(lineno)d)"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CustomFormatter(logging.Formatter):
    """Colourised formatter for interactive terminals."""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    FORMATS = {
        logging.DEBUG: grey + LOG_FORMAT + reset,
        logging.INFO: LOG_FORMAT,
        logging.WARNING: yellow + LOG_FORMAT + reset,
        logging.ERROR: red + LOG_FORMAT + reset,
        logging.CRITICAL: bold_red + LOG_FORMAT + reset,
    }

    def __init__(self, use_color: bool = True):
        super().__init__(LOG_FORMAT, DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        formatter = logging.Formatter(self.FORMATS.get(record.levelno), DATE_FORMAT)
        return formatter.format(record)


def init_logger(name: str, log_level: int = logging.INFO) -> Logger:
    """
    Create (or fetch) a module logger writing to stdout.

    Calling this twice for the same name does not attach a second handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(CustomFormatter(use_color=sys.stdout.isatty()))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
