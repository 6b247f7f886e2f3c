"""
Logging for the storefront client.

    from storefront.logging import get_logger
    logger = get_logger(__name__)

Session ids, bearer tokens and customer emails only reach the logs through
the sanitizers below.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_SIMPLE = "[%(levelname)s] %(name)s: %(message)s"

# Loggers that log every request the cart client makes
_NOISY_LOGGERS = ("httpx", "httpcore")

_ID_PREFIX_LENGTH = 8
_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def _level_from_env() -> int:
    return getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def configure_logging() -> None:
    """Attach a stdout handler to the root logger if the host app has not."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = _level_from_env()
    fmt = LOG_FORMAT_SIMPLE if os.environ.get("LOG_FORMAT", "").lower() == "simple" else LOG_FORMAT

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    root.setLevel(level)
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape(value: str) -> str:
    # Newlines would let a server message forge log lines
    return value.translate(_CONTROL_CHARS)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """First few characters of a session id or token, "N/A" when missing."""
    if not id_value:
        return "N/A"
    return _escape(str(id_value))[:_ID_PREFIX_LENGTH]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """
    Escaped and truncated free text (emails, order numbers, server details).

    Truncated values end in "...".
    """
    if not value:
        return "N/A"
    safe_value = _escape(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
