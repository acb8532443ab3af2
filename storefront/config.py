"""Storefront configuration: pricing rules and checkout settings."""
import os
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.money import CURRENCY

# Demo key used when no Razorpay key is configured
DEMO_PROVIDER_KEY = "rzp_test_xxxxxxxx"

DEFAULT_RAZORPAY_API_URL = "https://api.razorpay.com/v1"
DEFAULT_SNAPSHOT_KEY = "repx_cart"

# Checked in order; the NEXT_PUBLIC_ name is what the web build used
PROVIDER_KEY_ENV_VARS = ("RAZORPAY_KEY_ID", "NEXT_PUBLIC_RAZORPAY_KEY_ID")


class PricingConfig(BaseModel):
    """Immutable pricing rules injected into PricingEngine and CouponValidator."""
    model_config = ConfigDict(frozen=True)

    free_shipping_threshold: int = Field(default=1499, ge=0)
    flat_shipping_fee: int = Field(default=49, ge=0)
    coupon_discount_rate: Decimal = Field(default=Decimal("0.10"), ge=0, le=1)
    valid_coupon_codes: frozenset[str] = frozenset({"REPX10"})

    @field_validator("valid_coupon_codes", mode="before")
    @classmethod
    def normalize_codes(cls, v):
        return frozenset(str(code).strip().upper() for code in v)


class Prefill(BaseModel):
    """Contact details prefilled in the payment widget."""
    model_config = ConfigDict(frozen=True)

    name: str = "repX Customer"
    email: str = "customer@example.com"
    contact: str = "9999999999"


class CheckoutConfig(BaseModel):
    """Checkout settings. provider_key is None when deployment did not set one."""
    model_config = ConfigDict(frozen=True)

    provider_key: Optional[str] = None
    provider_secret: Optional[str] = None
    fallback_key: str = DEMO_PROVIDER_KEY
    api_url: str = DEFAULT_RAZORPAY_API_URL
    currency: str = CURRENCY
    display_name: str = "repX"
    description: str = "repX Order"
    image: str = "/favicon.ico"
    theme_color: str = "#111827"
    prefill: Prefill = Prefill()
    notes: dict[str, str] = Field(default_factory=lambda: {"brand": "repX"})

    @property
    def has_provider_key(self) -> bool:
        return bool(self.provider_key)

    @classmethod
    def from_env(cls) -> "CheckoutConfig":
        """Build checkout settings from environment variables."""
        key = None
        for name in PROVIDER_KEY_ENV_VARS:
            key = os.environ.get(name) or None
            if key:
                break
        return cls(
            provider_key=key,
            provider_secret=os.environ.get("RAZORPAY_KEY_SECRET") or None,
            api_url=os.environ.get("RAZORPAY_API_URL", DEFAULT_RAZORPAY_API_URL),
        )


def get_snapshot_key(session_id: Optional[str] = None) -> str:
    """Persistence slot for a cart snapshot, suffixed with the browser session when there is one."""
    base = os.environ.get("CART_SNAPSHOT_KEY", DEFAULT_SNAPSHOT_KEY)
    return f"{base}:{session_id}" if session_id else base
