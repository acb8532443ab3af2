"""Best-effort cart snapshot persistence."""
import json
from dataclasses import dataclass, field
from typing import Optional, Protocol

from storefront.db import TTL, get_redis
from storefront.errors import PersistenceError
from storefront.logging import get_logger
from .models import LineItem

logger = get_logger(__name__)


class SnapshotStore(Protocol):
    """Key-value slot holding serialized snapshots. Failures raise PersistenceError."""

    async def read(self, key: str) -> Optional[str]: ...

    async def write(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store; durable only for the life of the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def write(self, key: str, value: str) -> None:
        self.data[key] = value


class RedisStore:
    """Upstash Redis backed store."""

    def __init__(self, redis=None, ttl: Optional[int] = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise PersistenceError(f"Redis not available: {e}") from e
        return self._redis

    async def read(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to read {key}: {e}") from e

    async def write(self, key: str, value: str) -> None:
        try:
            await self.redis.set(key, value, ex=self.ttl)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to write {key}: {e}") from e


@dataclass
class LoadResult:
    """Restored items; degraded is True when the snapshot could not be used."""
    items: list[LineItem] = field(default_factory=list)
    degraded: bool = False


class PersistenceAdapter:
    """
    Loads and saves the cart snapshot under one key.

    Never raises: a broken or missing store leaves the cart working but
    non-durable, which callers can see through LoadResult.degraded and
    the boolean returned by save().
    """

    def __init__(self, store: Optional[SnapshotStore], key: str):
        self.store = store
        self.key = key

    async def load(self) -> LoadResult:
        if self.store is None:
            return LoadResult(degraded=True)
        try:
            raw = await self.store.read(self.key)
        except PersistenceError as e:
            logger.warning(f"Cart snapshot unavailable, starting empty: {e}")
            return LoadResult(degraded=True)

        if not raw:
            return LoadResult()

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError("snapshot is not a list")
            items = [LineItem.from_dict(entry) for entry in data]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Corrupted cart snapshot, starting empty: {e}")
            return LoadResult(degraded=True)

        return LoadResult(items=_merge_duplicates(items))

    async def save(self, items: list[LineItem]) -> bool:
        if self.store is None:
            return False
        payload = json.dumps([item.to_dict() for item in items])
        try:
            await self.store.write(self.key, payload)
            return True
        except PersistenceError as e:
            logger.warning(f"Cart snapshot not saved: {e}")
            return False


def _merge_duplicates(items: list[LineItem]) -> list[LineItem]:
    """Fold entries sharing an identity key so a hand-edited snapshot stays valid."""
    merged: dict = {}
    for item in items:
        existing = merged.get(item.key)
        if existing:
            existing.quantity += item.quantity
        else:
            merged[item.key] = item
    return list(merged.values())
