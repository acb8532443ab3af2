"""Coupon code validation."""
from typing import Optional

from storefront.config import PricingConfig


def normalize_code(code: Optional[str]) -> str:
    """Trim and upper-case; None becomes an empty string."""
    return (code or "").strip().upper()


class CouponValidator:
    """Exact-match check against the configured code set."""

    def __init__(self, config: PricingConfig):
        self.valid_codes = config.valid_coupon_codes

    def validate(self, code: Optional[str]) -> bool:
        normalized = normalize_code(code)
        return bool(normalized) and normalized in self.valid_codes
