"""
Store Router

Cart and checkout endpoints for the storefront page.

Every response carries the notices raised while handling the request,
so the page can show them in its single notification area. Carts are
per browser session: the session id travels in the repx_session cookie
(or the X-Session-Id header for non-browser clients).
"""
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Header, HTTPException, Request, Response

from storefront.cart import ItemKey
from storefront.catalog import SIZES, Size
from storefront.db import TTL
from storefront.errors import (
    ERROR_INVALID_SIGNATURE,
    ERROR_ITEM_NOT_FOUND,
    ERROR_PRODUCT_NOT_FOUND,
    PaymentVerificationError,
)
from storefront.logging import get_logger
from storefront.session import Storefront, is_valid_session_id, new_session_id
from .models import AddToCartRequest, ApplyCouponRequest, ConfirmPaymentRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/store", tags=["store"])

SESSION_COOKIE = "repx_session"
SESSION_HEADER = "X-Session-Id"


async def get_storefront(
    request: Request,
    response: Response,
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    session_header: Optional[str] = Header(None, alias=SESSION_HEADER),
) -> Storefront:
    """Storefront of the caller's session. Callers without a usable id get a new one."""
    session_id = next(
        (value for value in (session_cookie, session_header) if is_valid_session_id(value)),
        None,
    )
    if session_id is None:
        session_id = new_session_id()
        response.set_cookie(SESSION_COOKIE, session_id, max_age=TTL.CART, httponly=True, samesite="lax")
    response.headers[SESSION_HEADER] = session_id
    return await request.app.state.sessions.get(session_id)


def _cart_response(storefront: Storefront) -> dict:
    return {
        **storefront.summary(),
        "checkout_state": storefront.checkout_state.value,
        "notices": [notice.to_dict() for notice in storefront.drain_notices()],
    }


def _checkout_response(storefront: Storefront, started: bool = False) -> dict:
    handle = storefront.checkout.handle
    return {
        "started": started,
        "state": storefront.checkout_state.value,
        "order_id": handle.order_id if handle else None,
        "options": handle.options if handle else None,
        "last_outcome": storefront.checkout.last_outcome.value if storefront.checkout.last_outcome else None,
        "last_payment_id": storefront.checkout.last_payment_id,
        "notices": [notice.to_dict() for notice in storefront.drain_notices()],
    }


@router.get("/catalog")
async def get_catalog(storefront: Storefront = Depends(get_storefront)):
    """Products with their allowed sizes and colors."""
    return {
        "sizes": [size.value for size in SIZES],
        "products": [product.model_dump(mode="json") for product in storefront.catalog],
    }


@router.get("/cart")
async def get_cart(storefront: Storefront = Depends(get_storefront)):
    return _cart_response(storefront)


@router.post("/cart/add")
async def add_to_cart(request: AddToCartRequest, storefront: Storefront = Depends(get_storefront)):
    try:
        await storefront.add_item(request.product_id, request.size, request.color)
    except KeyError:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    return _cart_response(storefront)


@router.patch("/cart/item")
async def update_cart_item(request: UpdateCartItemRequest, storefront: Storefront = Depends(get_storefront)):
    """Shift an item's quantity by delta (never below 1)."""
    key = ItemKey(request.product_id, request.size, request.color)
    item = await storefront.update_quantity(key, request.delta)
    if item is None:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_FOUND)
    return _cart_response(storefront)


@router.delete("/cart/item")
async def remove_cart_item(
    product_id: int,
    size: Size,
    color: str,
    storefront: Storefront = Depends(get_storefront),
):
    removed = await storefront.remove_item(ItemKey(product_id, size, color))
    if not removed:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_FOUND)
    return _cart_response(storefront)


@router.delete("/cart")
async def clear_cart(storefront: Storefront = Depends(get_storefront)):
    await storefront.clear()
    return _cart_response(storefront)


@router.post("/cart/coupon")
async def apply_coupon(request: ApplyCouponRequest, storefront: Storefront = Depends(get_storefront)):
    await storefront.set_coupon(request.code)
    return _cart_response(storefront)


@router.get("/checkout")
async def get_checkout(storefront: Storefront = Depends(get_storefront)):
    return _checkout_response(storefront)


@router.post("/checkout")
async def start_checkout(storefront: Storefront = Depends(get_storefront)):
    """Open the payment provider for the current cart total."""
    started = await storefront.start_checkout()
    return _checkout_response(storefront, started=started)


@router.post("/checkout/confirm")
async def confirm_payment(request: ConfirmPaymentRequest, storefront: Storefront = Depends(get_storefront)):
    """Razorpay success handler posts here."""
    try:
        await storefront.confirm_payment(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
        )
    except PaymentVerificationError as e:
        status_code = 400 if str(e) == ERROR_INVALID_SIGNATURE else 409
        raise HTTPException(status_code=status_code, detail=str(e))
    return _checkout_response(storefront)
