"""
Tests for cart snapshot persistence
"""
import json
from unittest.mock import AsyncMock

import pytest
from conftest import BrokenStore, SNAPSHOT_KEY

from storefront.cart import ItemKey, LineItem, MemoryStore, PersistenceAdapter, RedisStore
from storefront.catalog import Size
from storefront.errors import PersistenceError

SNAPSHOT = [
    {"productId": 1, "name": "Beast Mode Tee", "unitPrice": 899, "imageRef": "/images/beastmode.jpg",
     "size": "L", "color": "Black", "quantity": 2},
    {"productId": 2, "name": "No Pain No Gain Tee", "unitPrice": 799, "imageRef": "/images/nopain.jpg",
     "size": "M", "color": "Navy", "quantity": 1},
]


class TestPersistenceAdapter:

    @pytest.mark.asyncio
    async def test_load_snapshot(self):
        adapter = PersistenceAdapter(MemoryStore({SNAPSHOT_KEY: json.dumps(SNAPSHOT)}), SNAPSHOT_KEY)

        result = await adapter.load()

        assert result.degraded is False
        assert [item.key for item in result.items] == [
            ItemKey(1, Size.L, "Black"),
            ItemKey(2, Size.M, "Navy"),
        ]
        assert result.items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_missing_key_is_empty_not_degraded(self):
        result = await PersistenceAdapter(MemoryStore(), SNAPSHOT_KEY).load()

        assert result.items == []
        assert result.degraded is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            json.dumps({"items": []}),
            json.dumps([{"productId": 1}]),
            json.dumps([{**SNAPSHOT[0], "size": "XS"}]),
            json.dumps([{**SNAPSHOT[0], "quantity": 0}]),
        ],
    )
    async def test_malformed_snapshot_gives_empty_cart(self, raw):
        adapter = PersistenceAdapter(MemoryStore({SNAPSHOT_KEY: raw}), SNAPSHOT_KEY)

        result = await adapter.load()

        assert result.items == []
        assert result.degraded is True

    @pytest.mark.asyncio
    async def test_duplicate_keys_in_snapshot_are_merged(self):
        raw = json.dumps([SNAPSHOT[0], SNAPSHOT[0]])
        result = await PersistenceAdapter(MemoryStore({SNAPSHOT_KEY: raw}), SNAPSHOT_KEY).load()

        assert len(result.items) == 1
        assert result.items[0].quantity == 4

    @pytest.mark.asyncio
    async def test_unavailable_store(self):
        adapter = PersistenceAdapter(BrokenStore(), SNAPSHOT_KEY)

        result = await adapter.load()
        saved = await adapter.save([LineItem.from_dict(SNAPSHOT[0])])

        assert result.items == []
        assert result.degraded is True
        assert saved is False

    @pytest.mark.asyncio
    async def test_no_store(self):
        adapter = PersistenceAdapter(None, SNAPSHOT_KEY)

        assert (await adapter.load()).degraded is True
        assert await adapter.save([]) is False

    @pytest.mark.asyncio
    async def test_save_writes_json_array(self):
        store = MemoryStore()
        adapter = PersistenceAdapter(store, SNAPSHOT_KEY)

        saved = await adapter.save([LineItem.from_dict(entry) for entry in SNAPSHOT])

        assert saved is True
        assert json.loads(store.data[SNAPSHOT_KEY]) == SNAPSHOT

    @pytest.mark.asyncio
    async def test_broken_store_keeps_cart_working(self, beast_mode):
        from storefront.cart import CartStore

        store = BrokenStore()
        cart = CartStore(PersistenceAdapter(store, SNAPSHOT_KEY))

        await cart.add_item(beast_mode, Size.L, "Black")
        await cart.add_item(beast_mode, Size.L, "Black")

        assert cart.items[0].quantity == 2
        assert cart.degraded is True
        assert store.writes == 2


class TestRedisStore:

    @pytest.mark.asyncio
    async def test_read_write(self):
        redis = AsyncMock()
        redis.get.return_value = "[]"
        store = RedisStore(redis=redis, ttl=60)

        assert await store.read("repx_cart") == "[]"
        await store.write("repx_cart", "[]")

        redis.get.assert_awaited_once_with("repx_cart")
        redis.set.assert_awaited_once_with("repx_cart", "[]", ex=60)

    @pytest.mark.asyncio
    async def test_backend_errors_become_persistence_errors(self):
        redis = AsyncMock()
        redis.get.side_effect = ConnectionError("boom")
        redis.set.side_effect = ConnectionError("boom")
        store = RedisStore(redis=redis)

        with pytest.raises(PersistenceError):
            await store.read("repx_cart")
        with pytest.raises(PersistenceError):
            await store.write("repx_cart", "[]")

    @pytest.mark.asyncio
    async def test_unconfigured_redis(self, monkeypatch):
        import storefront.db as db

        monkeypatch.delenv("UPSTASH_REDIS_REST_URL", raising=False)
        monkeypatch.delenv("UPSTASH_REDIS_REST_TOKEN", raising=False)
        monkeypatch.setattr(db, "_redis_client", None)

        result = await PersistenceAdapter(RedisStore(), SNAPSHOT_KEY).load()

        assert result.degraded is True
