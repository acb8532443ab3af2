"""Pricing package: coupon validation and the pricing engine."""
from .coupons import CouponValidator, normalize_code
from .engine import PriceBreakdown, PricingEngine

__all__ = [
    "CouponValidator",
    "normalize_code",
    "PriceBreakdown",
    "PricingEngine",
]
