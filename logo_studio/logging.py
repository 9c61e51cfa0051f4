from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Client libraries that log every request at INFO.
NOISY_LOGGERS = ("httpx", "openai")


def setup_logging(level: Optional[str] = None, noisy: Iterable[str] = NOISY_LOGGERS) -> None:
    """Configure logging for the CLI and the image proxy.

    The level comes from the argument, then `LOG_LEVEL`, then INFO. HTTP client
    chatter is kept at WARNING unless DEBUG was asked for.
    """
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    resolved = getattr(logging, name, logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for logger_name in noisy:
        logging.getLogger(logger_name).setLevel(resolved if resolved <= logging.DEBUG else logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
