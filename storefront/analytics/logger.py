"""Logging for the storefront package.

All modules log through the ``storefront`` logger. Console output is
INFO and above; the optional log file also gets DEBUG lines with the call
site. HTTP client libraries are held at WARNING so per-call request lines
do not drown out basket and chat events.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from storefront.utils.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


def setup_logger(
    name: str = "storefront",
    log_file: Optional[str] = None,
    log_level: str = "INFO",
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Configure and return the package logger. Safe to call again to reconfigure."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    # Uvicorn configures the root logger; without this every line prints twice
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for noisy in quiet:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


# Global logger instance
logger = setup_logger(log_file=settings.log_file, log_level=settings.log_level)
