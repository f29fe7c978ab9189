"""Checkout domain API package."""

from checkout.api.routes import cart_router, sessions

__all__ = ["cart_router", "sessions"]
