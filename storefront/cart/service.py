"""Cart store: the only place cart contents change."""
import asyncio
from typing import Optional

from storefront.catalog import DEFAULT_SIZE, Product, Size
from storefront.logging import get_logger, sanitize_string_for_logging
from .models import ItemKey, LineItem
from .storage import LoadResult, PersistenceAdapter

logger = get_logger(__name__)


class CartStore:
    """
    Owns the line items and the coupon text for one shopping session.

    Each mutation runs under a lock together with its snapshot write, so
    snapshots land in the order the mutations happened.
    """

    def __init__(self, persistence: Optional[PersistenceAdapter] = None):
        self.persistence = persistence
        self._items: list[LineItem] = []
        self._coupon: Optional[str] = None
        self._lock = asyncio.Lock()
        self.degraded = persistence is None

    @property
    def items(self) -> tuple[LineItem, ...]:
        """Line items in insertion order."""
        return tuple(self._items)

    @property
    def coupon(self) -> Optional[str]:
        return self._coupon

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    def find(self, key: ItemKey) -> Optional[LineItem]:
        return next((item for item in self._items if item.key == key), None)

    async def restore(self) -> LoadResult:
        """Replace contents with the persisted snapshot (session start)."""
        if self.persistence is None:
            return LoadResult(degraded=True)
        async with self._lock:
            result = await self.persistence.load()
            self._items = list(result.items)
            self.degraded = result.degraded
        logger.info(f"Cart restored with {len(result.items)} line items (degraded={result.degraded})")
        return result

    async def add_item(
        self,
        product: Product,
        size: Size = DEFAULT_SIZE,
        color: Optional[str] = None,
    ) -> LineItem:
        """Add one unit; merges into an existing line with the same key."""
        color = color or product.default_color
        key = ItemKey(product.id, Size(size), color)
        async with self._lock:
            item = self.find(key)
            if item:
                item.quantity += 1
            else:
                item = LineItem.from_product(product, key.size, color)
                self._items.append(item)
            await self._persist()
        return item

    async def update_quantity(self, key: ItemKey, delta: int) -> Optional[LineItem]:
        """Shift quantity by delta, never below 1. No-op for unknown keys."""
        async with self._lock:
            item = self.find(key)
            if item is None:
                return None
            item.quantity = max(1, item.quantity + delta)
            await self._persist()
        return item

    async def remove_item(self, key: ItemKey) -> bool:
        async with self._lock:
            item = self.find(key)
            if item is None:
                return False
            self._items.remove(item)
            await self._persist()
        return True

    async def set_coupon(self, code: Optional[str]) -> None:
        """Store the coupon text as typed; blank clears it."""
        async with self._lock:
            self._coupon = code if code and code.strip() else None
            logger.debug(f"Coupon set to {sanitize_string_for_logging(self._coupon)}")
            await self._persist()

    async def clear(self) -> None:
        """Empty the cart and drop the coupon."""
        async with self._lock:
            self._items = []
            self._coupon = None
            await self._persist()

    async def _persist(self) -> None:
        if self.persistence is None:
            return
        saved = await self.persistence.save(self._items)
        self.degraded = not saved
