"""Pytest configuration and fixtures"""
import json
import os

import pytest

from storefront.cart import CartStore, MemoryStore, PersistenceAdapter
from storefront.catalog import Catalog
from storefront.checkout import DemoProvider
from storefront.config import CheckoutConfig
from storefront.errors import PersistenceError
from storefront.session import Storefront, build_registry

# Keep tests away from real credentials
for _name in ("RAZORPAY_KEY_ID", "NEXT_PUBLIC_RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET",
              "UPSTASH_REDIS_REST_URL", "UPSTASH_REDIS_REST_TOKEN", "CART_SNAPSHOT_KEY"):
    os.environ.pop(_name, None)

SNAPSHOT_KEY = "repx_cart"


class BrokenStore:
    """Snapshot store whose backend is always down."""

    def __init__(self):
        self.writes = 0

    async def read(self, key):
        raise PersistenceError("store offline")

    async def write(self, key, value):
        self.writes += 1
        raise PersistenceError("store offline")


@pytest.fixture
def catalog():
    return Catalog()


@pytest.fixture
def beast_mode(catalog):
    """899, Black/Charcoal"""
    return catalog.get(1)


@pytest.fixture
def no_pain(catalog):
    """799, White/Navy"""
    return catalog.get(2)


@pytest.fixture
def one_more_rep(catalog):
    """849, Black"""
    return catalog.get(3)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def persistence(memory_store):
    return PersistenceAdapter(memory_store, SNAPSHOT_KEY)


@pytest.fixture
def cart(persistence):
    return CartStore(persistence)


@pytest.fixture
def demo_provider():
    return DemoProvider()


@pytest.fixture
def live_config():
    return CheckoutConfig(provider_key="rzp_test_live123")


@pytest.fixture
def storefront(cart, demo_provider, live_config):
    return Storefront(cart=cart, checkout_config=live_config, provider=demo_provider)


@pytest.fixture
def sessions(memory_store, demo_provider, live_config):
    """Per-session storefronts sharing the memory store and the demo provider"""
    return build_registry(store=memory_store, checkout_config=live_config, provider=demo_provider)


@pytest.fixture
def snapshot(memory_store):
    """Decoded snapshot currently held by the memory store."""
    def _read() -> list:
        raw = memory_store.data.get(SNAPSHOT_KEY)
        return json.loads(raw) if raw else []
    return _read
