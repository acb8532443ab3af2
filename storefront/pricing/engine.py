"""Cart pricing: subtotal, coupon discount, shipping and total."""
from dataclasses import dataclass
from typing import Iterable, Optional

from storefront.cart.models import LineItem
from storefront.config import PricingConfig
from storefront.money import apply_rate
from .coupons import CouponValidator


@dataclass(frozen=True)
class PriceBreakdown:
    """Derived cart amounts in whole rupees. Never stored, always recomputed."""
    subtotal: int
    discount: int
    shipping: int
    total: int

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "shipping": self.shipping,
            "total": self.total,
        }


class PricingEngine:
    """
    Pure pricing over (items, coupon).

    Calculation order:
    1. subtotal = sum of unit_price * quantity
    2. discount = rate * subtotal rounded half away from zero, valid coupon only
    3. shipping = flat fee up to and including the threshold, free above it, 0 for empty
    4. total = subtotal - discount + shipping, floored at 0
    """

    def __init__(self, config: Optional[PricingConfig] = None, validator: Optional[CouponValidator] = None):
        self.config = config or PricingConfig()
        self.validator = validator or CouponValidator(self.config)

    def subtotal(self, items: Iterable[LineItem]) -> int:
        return sum(item.unit_price * item.quantity for item in items)

    def discount(self, subtotal: int, coupon: Optional[str]) -> int:
        if not self.validator.validate(coupon):
            return 0
        return apply_rate(subtotal, self.config.coupon_discount_rate)

    def shipping(self, subtotal: int) -> int:
        if subtotal <= 0:
            return 0
        if subtotal > self.config.free_shipping_threshold:
            return 0
        return self.config.flat_shipping_fee

    def compute(self, items: Iterable[LineItem], coupon: Optional[str] = None) -> PriceBreakdown:
        subtotal = self.subtotal(items)
        discount = self.discount(subtotal, coupon)
        shipping = self.shipping(subtotal)
        total = max(subtotal - discount + shipping, 0)
        return PriceBreakdown(subtotal=subtotal, discount=discount, shipping=shipping, total=total)

    __call__ = compute

    def free_shipping_remaining(self, subtotal: int) -> int:
        """Rupees still needed before shipping becomes free (0 once it is)."""
        if subtotal > self.config.free_shipping_threshold:
            return 0
        return self.config.free_shipping_threshold + 1 - subtotal
