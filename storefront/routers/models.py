"""
Store API Pydantic Models

Request bodies for the cart and checkout endpoints.
"""
from typing import Optional

from pydantic import BaseModel

from storefront.catalog import DEFAULT_SIZE, Size


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: int
    size: Size = DEFAULT_SIZE
    color: Optional[str] = None


class UpdateCartItemRequest(BaseModel):
    product_id: int
    size: Size
    color: str
    delta: int


class ApplyCouponRequest(BaseModel):
    code: Optional[str] = None


# ==================== CHECKOUT MODELS ====================

class ConfirmPaymentRequest(BaseModel):
    """
    Fields Razorpay Checkout hands to its success handler.

    A widget opened without a server order returns only the payment id.
    """
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: str
    razorpay_signature: Optional[str] = None
