"""
Upstash Redis client for cart snapshots.

Uses the standard Upstash env var names:
- UPSTASH_REDIS_REST_URL
- UPSTASH_REDIS_REST_TOKEN
"""

import os
from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

_redis_client: Optional[AsyncRedis] = None


def is_redis_configured() -> bool:
    return bool(os.environ.get("UPSTASH_REDIS_REST_URL") and os.environ.get("UPSTASH_REDIS_REST_TOKEN"))


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Raises:
        ValueError: If the Upstash credentials are not set
    """
    global _redis_client

    if _redis_client is None:
        url = os.environ.get("UPSTASH_REDIS_REST_URL", "")
        token = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")
        if not url or not token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=url, token=token)

    return _redis_client


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CART = 30 * 86400  # abandoned carts linger for a month
