"""Storefront session: the operations a page or API calls."""
import asyncio
import re
import secrets
from typing import Awaitable, Callable, Optional

from storefront.cart import CartStore, ItemKey, LineItem, LoadResult, PersistenceAdapter, RedisStore
from storefront.cart.storage import SnapshotStore
from storefront.catalog import DEFAULT_SIZE, Catalog, Size
from storefront.checkout import CheckoutOrchestrator, CheckoutState, DemoProvider, PaymentProvider, RazorpayProvider
from storefront.config import CheckoutConfig, PricingConfig, get_snapshot_key
from storefront.db import is_redis_configured
from storefront.errors import ERROR_UNKNOWN_PAYMENT, PaymentVerificationError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.money import format_inr
from storefront.notices import Notice, NoticeChannel
from storefront.pricing import CouponValidator, PriceBreakdown, PricingEngine

logger = get_logger(__name__)

# token_urlsafe output; anything else from a client gets a fresh id
SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{16,64}")


class Storefront:
    """
    Wires catalog, cart, pricing and checkout together for one session.

    Pricing is never cached: every read recomputes it from the current
    items and coupon.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        cart: Optional[CartStore] = None,
        pricing_config: Optional[PricingConfig] = None,
        checkout_config: Optional[CheckoutConfig] = None,
        provider: Optional[PaymentProvider] = None,
        notices: Optional[NoticeChannel] = None,
    ):
        self.catalog = catalog or Catalog()
        self.cart = cart or CartStore()
        self.pricing_config = pricing_config or PricingConfig()
        self.coupons = CouponValidator(self.pricing_config)
        self.pricing_engine = PricingEngine(self.pricing_config, self.coupons)
        self.checkout_config = checkout_config or CheckoutConfig()
        self.notices = notices or NoticeChannel()
        self.provider = provider or DemoProvider()
        self.checkout = CheckoutOrchestrator(
            cart=self.cart,
            pricing=self.pricing_engine,
            provider=self.provider,
            config=self.checkout_config,
            notices=self.notices,
        )

    # ==================== Reads ====================

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self.cart.items

    @property
    def coupon(self) -> Optional[str]:
        return self.cart.coupon

    @property
    def pricing(self) -> PriceBreakdown:
        return self.pricing_engine.compute(self.cart.items, self.cart.coupon)

    @property
    def checkout_state(self) -> CheckoutState:
        return self.checkout.state

    def coupon_applied(self) -> bool:
        return self.coupons.validate(self.cart.coupon)

    def summary(self) -> dict:
        """Cart contents with derived pricing, for rendering."""
        pricing = self.pricing
        return {
            "is_empty": self.cart.is_empty,
            "total_items": self.cart.total_items,
            "items": [
                {**item.to_dict(), "lineTotal": item.line_total}
                for item in self.cart.items
            ],
            "coupon": self.cart.coupon,
            "coupon_applied": self.coupon_applied(),
            **pricing.to_dict(),
            "free_shipping_remaining": self.pricing_engine.free_shipping_remaining(pricing.subtotal),
            "currency": self.checkout_config.currency,
            "display": {name: format_inr(value) for name, value in pricing.to_dict().items()},
        }

    # ==================== Mutations ====================

    async def restore(self) -> LoadResult:
        return await self.cart.restore()

    async def add_item(self, product_id: int, size: Size = DEFAULT_SIZE, color: Optional[str] = None) -> LineItem:
        """Add a catalog product. Raises KeyError/ValueError for unknown product, size or color."""
        product = self.catalog.get(product_id)
        size = Size(size)
        if color is not None and not product.has_color(color):
            raise ValueError(f"{color!r} is not offered for {product.name}")
        return await self.cart.add_item(product, size, color)

    async def update_quantity(self, key: ItemKey, delta: int) -> Optional[LineItem]:
        return await self.cart.update_quantity(key, delta)

    async def remove_item(self, key: ItemKey) -> bool:
        return await self.cart.remove_item(key)

    async def clear(self) -> None:
        await self.cart.clear()

    async def set_coupon(self, code: Optional[str]) -> bool:
        """Store the coupon; returns whether it currently earns a discount."""
        await self.cart.set_coupon(code)
        return self.coupon_applied()

    # ==================== Checkout ====================

    async def start_checkout(self) -> bool:
        return await self.checkout.start()

    async def confirm_payment(
        self,
        order_id: Optional[str],
        payment_id: str,
        signature: Optional[str] = None,
    ) -> None:
        """
        Hand a provider callback to the provider that issued this session's order.

        A widget opened without an order id reports only the payment id; that
        payment belongs to the attempt currently awaiting the provider.
        """
        handle = self.checkout.handle
        if handle is None or (order_id is not None and order_id != handle.order_id):
            raise PaymentVerificationError(ERROR_UNKNOWN_PAYMENT)
        await self.provider.confirm(handle.order_id, payment_id, signature)

    def drain_notices(self) -> list[Notice]:
        return self.notices.drain()


StorefrontFactory = Callable[[str], Awaitable[Storefront]]


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


def is_valid_session_id(value: Optional[str]) -> bool:
    return bool(value) and SESSION_ID_PATTERN.fullmatch(value) is not None


class SessionRegistry:
    """
    One Storefront per browser session, built on first use.

    Each session owns its cart, coupon and checkout state machine, so an
    abandoned payment widget only blocks the session that opened it.
    """

    def __init__(self, factory: StorefrontFactory):
        self._factory = factory
        self._sessions: dict[str, Storefront] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    async def get(self, session_id: str) -> Storefront:
        storefront = self._sessions.get(session_id)
        if storefront is not None:
            return storefront

        async with self._lock:
            storefront = self._sessions.get(session_id)
            if storefront is None:
                storefront = await self._factory(session_id)
                self._sessions[session_id] = storefront
                logger.info(
                    f"Session {sanitize_id_for_logging(session_id)} opened with {len(storefront.items)} item(s)"
                )
        return storefront

    async def aclose(self) -> None:
        """Close every distinct provider the sessions hold."""
        providers = {id(s.provider): s.provider for s in self._sessions.values()}
        for provider in providers.values():
            aclose = getattr(provider, "aclose", None)
            if aclose is not None:
                await aclose()
        self._sessions.clear()


def build_provider(config: CheckoutConfig) -> PaymentProvider:
    """Razorpay when key id and secret are both set, the demo provider otherwise."""
    if config.provider_key and config.provider_secret:
        return RazorpayProvider(config.provider_key, config.provider_secret, api_url=config.api_url)
    logger.warning("Razorpay credentials incomplete, checkout runs against the demo provider")
    return DemoProvider()


def build_snapshot_store() -> Optional[SnapshotStore]:
    if is_redis_configured():
        return RedisStore()
    logger.warning("Upstash Redis not configured, cart will not persist")
    return None


async def create_storefront(
    session_id: Optional[str] = None,
    store: Optional[SnapshotStore] = None,
    checkout_config: Optional[CheckoutConfig] = None,
    provider: Optional[PaymentProvider] = None,
) -> Storefront:
    """Build a session from the environment and restore its saved cart."""
    checkout_config = checkout_config or CheckoutConfig.from_env()
    if store is None:
        store = build_snapshot_store()
    persistence = PersistenceAdapter(store, get_snapshot_key(session_id)) if store is not None else None
    storefront = Storefront(
        cart=CartStore(persistence),
        checkout_config=checkout_config,
        provider=provider or build_provider(checkout_config),
    )
    await storefront.restore()
    return storefront


def build_registry(
    store: Optional[SnapshotStore] = None,
    checkout_config: Optional[CheckoutConfig] = None,
    provider: Optional[PaymentProvider] = None,
) -> SessionRegistry:
    """Registry whose sessions share one snapshot store and one payment provider."""
    checkout_config = checkout_config or CheckoutConfig.from_env()
    if store is None:
        store = build_snapshot_store()
    provider = provider or build_provider(checkout_config)

    async def factory(session_id: str) -> Storefront:
        return await create_storefront(session_id, store=store, checkout_config=checkout_config, provider=provider)

    return SessionRegistry(factory)
