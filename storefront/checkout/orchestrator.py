"""Checkout orchestration: cart totals -> payment provider -> reconciliation."""
import uuid
from typing import Optional

from storefront.cart import CartStore
from storefront.config import CheckoutConfig
from storefront.errors import (
    ERROR_CHECKOUT_OPEN_FAILED,
    ERROR_PROVIDER_NOT_CONFIGURED,
    MSG_PAYMENT_SUCCESS,
    ProviderUnavailableError,
)
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.money import to_paise
from storefront.notices import NoticeChannel
from storefront.pricing import PriceBreakdown, PricingEngine
from .constants import OPEN_STATES, TRANSITIONS, CheckoutState
from .models import CheckoutHandle, PaymentRequest, PaymentResult, SuccessCallback
from .providers import PaymentProvider

logger = get_logger(__name__)


class CheckoutOrchestrator:
    """
    Drives a single checkout attempt at a time.

    start() returns as soon as the provider is open. The provider later
    calls the continuation registered for that attempt; callbacks for any
    other attempt are ignored. There is no timeout: an attempt the
    provider never answers stays in AWAITING_PROVIDER.
    """

    def __init__(
        self,
        cart: CartStore,
        pricing: PricingEngine,
        provider: PaymentProvider,
        config: Optional[CheckoutConfig] = None,
        notices: Optional[NoticeChannel] = None,
    ):
        self.cart = cart
        self.pricing = pricing
        self.provider = provider
        self.config = config or CheckoutConfig()
        self.notices = notices or NoticeChannel()

        self._state = CheckoutState.IDLE
        self._attempt_id: Optional[str] = None
        self.handle: Optional[CheckoutHandle] = None
        self.last_outcome: Optional[CheckoutState] = None
        self.last_payment_id: Optional[str] = None

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def attempt_id(self) -> Optional[str]:
        return self._attempt_id

    def _transition(self, new_state: CheckoutState) -> None:
        if new_state not in TRANSITIONS[self._state]:
            raise RuntimeError(f"Invalid checkout transition {self._state.value} -> {new_state.value}")
        logger.debug(f"Checkout {self._state.value} -> {new_state.value}")
        self._state = new_state

    def _provider_key(self) -> str:
        if not self.config.has_provider_key:
            raise ProviderUnavailableError("Payment provider key not configured, using demo key")
        return self.config.provider_key

    def build_request(self, pricing: PriceBreakdown, attempt_id: str) -> PaymentRequest:
        """Payment request for the current totals; warns and falls back to the demo key if unset."""
        try:
            key = self._provider_key()
        except ProviderUnavailableError as e:
            logger.warning(str(e))
            self.notices.warning(ERROR_PROVIDER_NOT_CONFIGURED)
            key = self.config.fallback_key

        return PaymentRequest(
            provider_key=key,
            amount=to_paise(pricing.total),
            currency=self.config.currency,
            display_name=self.config.display_name,
            description=self.config.description,
            image=self.config.image,
            prefill=self.config.prefill,
            notes=self.config.notes,
            theme_color=self.config.theme_color,
            receipt=attempt_id,
        )

    async def start(self) -> bool:
        """
        Begin checkout for the current cart.

        Returns True once the provider is open (or already reported success),
        False when nothing was started or opening failed.
        """
        if self._state is not CheckoutState.IDLE:
            logger.info(f"Checkout start ignored in state {self._state.value}")
            return False

        pricing = self.pricing.compute(self.cart.items, self.cart.coupon)
        if self.cart.is_empty or pricing.total <= 0:
            return False

        self._transition(CheckoutState.PREPARING)
        attempt_id = uuid.uuid4().hex
        self._attempt_id = attempt_id

        try:
            request = self.build_request(pricing, attempt_id)
            handle = await self.provider.open(request, self._continuation(attempt_id))
        except Exception:
            logger.error(f"Unable to open checkout for attempt {attempt_id}", exc_info=True)
            self._attempt_id = None
            self._finish(CheckoutState.FAILED)
            self.notices.error(ERROR_CHECKOUT_OPEN_FAILED)
            self._transition(CheckoutState.IDLE)
            return False

        # The provider may already have called back from inside open()
        if self._attempt_id == attempt_id and self._state is CheckoutState.PREPARING:
            self.handle = handle
            self._transition(CheckoutState.AWAITING_PROVIDER)
            logger.info(f"Checkout attempt {attempt_id} awaiting provider, amount={request.amount}")
        return True

    def _continuation(self, attempt_id: str) -> SuccessCallback:
        async def on_success(result: PaymentResult) -> None:
            await self._reconcile_success(attempt_id, result)

        return on_success

    async def _reconcile_success(self, attempt_id: str, result: PaymentResult) -> None:
        if attempt_id != self._attempt_id or self._state not in OPEN_STATES:
            logger.warning(
                f"Ignoring payment {sanitize_id_for_logging(result.payment_id)} for stale attempt {attempt_id}"
            )
            return

        self._attempt_id = None
        self.handle = None
        self._finish(CheckoutState.SUCCESS)
        self.last_payment_id = result.payment_id

        await self.cart.clear()
        logger.info(f"Payment {sanitize_id_for_logging(result.payment_id)} confirmed, cart cleared")
        self.notices.info(
            MSG_PAYMENT_SUCCESS.format(payment_id=result.payment_id or "demo"),
            payment_id=result.payment_id,
        )
        self._transition(CheckoutState.IDLE)

    def _finish(self, outcome: CheckoutState) -> None:
        self._transition(outcome)
        self.last_outcome = outcome
