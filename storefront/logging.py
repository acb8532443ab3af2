"""
Logging setup for the storefront.

Every module asks for its logger with get_logger(__name__). Ids and
shopper input pass through the sanitize helpers before they reach a log
line.
"""

import logging
import os
import sys
from functools import cache

_VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Vercel stamps its own timestamps
_DEPLOYED_FORMAT = "%(levelname)s - %(name)s - %(message)s"

_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _setup() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    deployed = os.environ.get("VERCEL") == "1"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_DEPLOYED_FORMAT if deployed else _VERBOSE_FORMAT))
    root.setLevel(level)
    root.addHandler(handler)

    # Razorpay and Upstash calls both go through httpx
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


_setup()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """First 8 characters of a payment, order or session id, control characters escaped."""
    if not id_value:
        return "N/A"
    return str(id_value).translate(_ESCAPES)[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Shopper-typed text (coupon codes) with control characters escaped, truncated to max_length."""
    if not value:
        return "N/A"
    safe_value = str(value).translate(_ESCAPES)
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."
