"""
Storefront errors.

Message constants shared by notices and HTTP responses, plus the
exception types raised inside the cart/checkout core.
"""

# Checkout notices
ERROR_CHECKOUT_OPEN_FAILED = "Unable to open checkout. Please try again."
ERROR_PROVIDER_NOT_CONFIGURED = (
    "Add RAZORPAY_KEY_ID to use live checkout. Proceeding with demo order..."
)
MSG_PAYMENT_SUCCESS = "Payment success! Payment ID: {payment_id}"

# Request errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_ITEM_NOT_FOUND = "Cart item not found"
ERROR_INVALID_SIGNATURE = "Invalid signature"
ERROR_UNKNOWN_PAYMENT = "No checkout is waiting for this payment"


class StorefrontError(Exception):
    """Base class for storefront core errors."""


class PersistenceError(StorefrontError):
    """Cart snapshot could not be read from or written to the store."""


class ProviderUnavailableError(StorefrontError):
    """Payment provider key is missing; checkout runs in demo mode."""


class ProviderOpenError(StorefrontError):
    """Payment provider could not be constructed or opened."""


class PaymentVerificationError(StorefrontError):
    """Provider callback could not be matched or its signature is wrong."""


__all__ = [
    "ERROR_CHECKOUT_OPEN_FAILED",
    "ERROR_PROVIDER_NOT_CONFIGURED",
    "MSG_PAYMENT_SUCCESS",
    "ERROR_PRODUCT_NOT_FOUND",
    "ERROR_ITEM_NOT_FOUND",
    "ERROR_INVALID_SIGNATURE",
    "ERROR_UNKNOWN_PAYMENT",
    "StorefrontError",
    "PersistenceError",
    "ProviderUnavailableError",
    "ProviderOpenError",
    "PaymentVerificationError",
]
