"""Storefront-flavoured helpers on top of the tracker.

All helpers are silent when no tracker is wired in, so callers never need to
check whether analytics is enabled.
"""

from tracking.tracker import Tracker


class EcommerceTracker:
    def __init__(self, tracker: Tracker | None = None) -> None:
        self.tracker = tracker

    def _track(self, event_name, data):
        if self.tracker is not None:
            self.tracker.track(event_name, data)

    def product_view(self, product_id, name, price=None, category=None, sku=None):
        self._track(
            "product_view",
            {"productId": str(product_id), "productName": name, "price": price, "category": category, "sku": sku},
        )

    def add_to_cart(self, product_id, name, price, quantity=1, category=None, sku=None):
        self._track(
            "add_to_cart",
            {
                "productId": str(product_id),
                "productName": name,
                "price": price,
                "quantity": quantity or 1,
                "category": category,
                "sku": sku,
            },
        )

    def remove_from_cart(self, product_id, name, price, quantity=1):
        self._track(
            "remove_from_cart",
            {"productId": str(product_id), "productName": name, "price": price, "quantity": quantity or 1},
        )

    def checkout_started(self, cart_value=None, item_count=None, currency="USD"):
        self._track("checkout_started", {"cartValue": cart_value, "itemCount": item_count, "currency": currency})

    def checkout_step(self, step, **data):
        self._track("checkout_step", {"step": step, **data})

    def purchase(self, order_id, value, items, currency="USD", shipping=None, tax=None, discount=None):
        if self.tracker is None:
            return
        self.tracker.convert(
            {
                "orderId": order_id,
                "value": value,
                "currency": currency,
                "items": items,
                "shipping": shipping,
                "tax": tax,
                "discount": discount,
            }
        )

    def search(self, query, results_count=None):
        self._track("search", {"query": query, "resultsCount": results_count})
