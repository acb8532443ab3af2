"""Payment providers: Razorpay and an in-process demo provider."""
import hashlib
import hmac
import uuid
from typing import Optional, Protocol

import httpx

from storefront.config import DEFAULT_RAZORPAY_API_URL
from storefront.errors import (
    ERROR_INVALID_SIGNATURE,
    ERROR_UNKNOWN_PAYMENT,
    PaymentVerificationError,
    ProviderOpenError,
)
from storefront.logging import get_logger, sanitize_id_for_logging
from .models import CheckoutHandle, PaymentRequest, PaymentResult, SuccessCallback

logger = get_logger(__name__)


class PaymentProvider(Protocol):
    """
    External payment integration.

    open() returns once the payment UI can be shown; the outcome comes
    later through on_success. Any exception from open() means the
    provider could not be opened.
    """

    async def open(self, request: PaymentRequest, on_success: SuccessCallback) -> CheckoutHandle: ...

    async def confirm(self, order_id: str, payment_id: str, signature: Optional[str] = None) -> None: ...


class DemoProvider:
    """
    Provider stand-in for demo mode: nothing leaves the process.

    The order id stays server side. Widget options carry no order_id since
    Razorpay rejects ids it never issued, so the browser only hands back a
    payment id.
    """

    def __init__(self):
        self.opened: list[PaymentRequest] = []
        self._pending: dict[str, SuccessCallback] = {}

    async def open(self, request: PaymentRequest, on_success: SuccessCallback) -> CheckoutHandle:
        order_id = f"order_demo_{uuid.uuid4().hex[:14]}"
        self.opened.append(request)
        self._pending[order_id] = on_success
        logger.info(f"Demo checkout opened: order={order_id} amount={request.amount} {request.currency}")
        return CheckoutHandle(order_id=order_id, options=request.to_checkout_options())

    async def confirm(self, order_id: str, payment_id: str, signature: Optional[str] = None) -> None:
        on_success = self._pending.pop(order_id, None)
        if on_success is None:
            raise PaymentVerificationError(ERROR_UNKNOWN_PAYMENT)
        await on_success(PaymentResult(payment_id=payment_id, order_id=order_id))

    async def complete(self, payment_id: Optional[str] = None) -> str:
        """Pay the most recently opened order. Returns the payment id used."""
        if not self._pending:
            raise PaymentVerificationError(ERROR_UNKNOWN_PAYMENT)
        order_id = next(reversed(self._pending))
        payment_id = payment_id or f"pay_demo_{uuid.uuid4().hex[:14]}"
        await self.confirm(order_id, payment_id)
        return payment_id


class RazorpayProvider:
    """
    Razorpay Standard Checkout, server side.

    open() creates an order through the Orders API; the widget options it
    returns carry that order_id. The browser posts the payment back and
    confirm() checks the signature before running the continuation.
    """

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = DEFAULT_RAZORPAY_API_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self._http_client = http_client
        self._pending: dict[str, SuccessCallback] = {}

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=10.0),
            )
        return self._http_client

    async def open(self, request: PaymentRequest, on_success: SuccessCallback) -> CheckoutHandle:
        if not self.key_id or not self.key_secret:
            raise ProviderOpenError("Razorpay credentials (RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET) not set")

        payload = {
            "amount": request.amount,
            "currency": request.currency,
            "receipt": request.receipt,
            "notes": request.notes,
        }

        client = await self._get_http_client()
        try:
            response = await client.post(
                f"{self.api_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            detail = e.response.text[:200]
            logger.error(f"Razorpay API error {e.response.status_code}: {detail}")
            raise ProviderOpenError(f"Razorpay API error: {detail}") from e
        except httpx.RequestError as e:
            logger.error(f"Razorpay network error: {e}")
            raise ProviderOpenError(f"Failed to connect to Razorpay API: {e!s}") from e

        order_id = data.get("id") if isinstance(data, dict) else None
        if not order_id:
            raise ProviderOpenError("Order id not found in Razorpay response")

        self._pending[order_id] = on_success
        logger.info(f"Razorpay order created: {sanitize_id_for_logging(order_id)} receipt={request.receipt}")
        return CheckoutHandle(order_id=order_id, options=request.to_checkout_options(order_id))

    def verify_signature(self, order_id: str, payment_id: str, signature: Optional[str]) -> bool:
        """Razorpay signs "order_id|payment_id" with the key secret (HMAC-SHA256)."""
        if not signature:
            return False
        message = f"{order_id}|{payment_id}".encode()
        expected = hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()
        return hmac.compare_digest(expected, signature)

    async def confirm(self, order_id: str, payment_id: str, signature: Optional[str] = None) -> None:
        on_success = self._pending.get(order_id)
        if on_success is None:
            raise PaymentVerificationError(ERROR_UNKNOWN_PAYMENT)
        if not self.verify_signature(order_id, payment_id, signature):
            logger.error(f"Razorpay signature mismatch for order {sanitize_id_for_logging(order_id)}")
            raise PaymentVerificationError(ERROR_INVALID_SIGNATURE)

        del self._pending[order_id]
        await on_success(PaymentResult(payment_id=payment_id, order_id=order_id))

    async def aclose(self) -> None:
        """Close http client if created."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
