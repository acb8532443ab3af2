"""
repX Storefront Core

Cart, pricing and checkout for the repX storefront page:
- catalog: typed products and sizes
- cart: line items, cart store, snapshot persistence
- pricing: coupon validation and the pricing engine
- checkout: checkout state machine and payment providers
- session: the Storefront facade and the per-session registry behind the API
"""
from storefront.session import SessionRegistry, Storefront, build_registry, create_storefront

__all__ = ["SessionRegistry", "Storefront", "build_registry", "create_storefront"]
