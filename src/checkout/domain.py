"""Checkout bounded context: Shopping Cart and order submission.

Owns the storefront cart (items, selection, discount code, shipping option),
derives the checkout totals and hands the final order off to the backend API.
"""

from protean.domain import Domain

from checkout.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
checkout = Domain(name="checkout")
