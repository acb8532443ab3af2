"""Cart package: models, snapshot persistence, and the cart store."""
from .models import ItemKey, LineItem
from .service import CartStore
from .storage import LoadResult, MemoryStore, PersistenceAdapter, RedisStore

__all__ = [
    "ItemKey",
    "LineItem",
    "CartStore",
    "LoadResult",
    "MemoryStore",
    "PersistenceAdapter",
    "RedisStore",
]
