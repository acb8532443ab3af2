"""HTTP routers for the storefront page."""
from .store import get_storefront, router

__all__ = ["get_storefront", "router"]
