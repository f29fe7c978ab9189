"""Storefront analytics emitted by CartStore operations."""

import pytest
from checkout.config import CartSettings
from checkout.discounts.fake_adapter import FakeDiscountValidator
from checkout.orders.fake_adapter import FakeOrderSubmitter
from checkout.store import CartStore
from protean.exceptions import ValidationError
from tracking.collector.fake_adapter import FakeCollector
from tracking.config import TrackerConfig
from tracking.scheduler import ManualScheduler
from tracking.tracker import Tracker


@pytest.fixture()
def tracker():
    tracker = Tracker(collector=FakeCollector(), scheduler=ManualScheduler())
    tracker.init(TrackerConfig(api_url="https://collect.example.com", website_id="site-1", batch_size=100))
    return tracker


@pytest.fixture()
def store(tracker):
    return CartStore(
        validator=FakeDiscountValidator(),
        submitter=FakeOrderSubmitter(),
        settings=CartSettings(),
        tracker=tracker,
    )


def _tracked(tracker, name):
    return [e for e in tracker.queue if e.event == name]


class TestCartAnalytics:
    def test_add_item_tracks_add_to_cart(self, store, tracker):
        store.add_item("rope-001", "Sour Apple Rope", 7.99, category="ropes")
        events = _tracked(tracker, "add_to_cart")
        assert len(events) == 1
        assert events[0].data["productId"] == "rope-001"
        assert events[0].data["category"] == "ropes"

    def test_remove_item_tracks_remove_from_cart(self, store, tracker):
        store.add_item("rope-001", "Sour Apple Rope", 7.99)
        store.remove_item("rope-001")
        store.remove_item("rope-001")
        assert len(_tracked(tracker, "remove_from_cart")) == 1

    def test_delete_selected_tracks_each_item(self, store, tracker):
        store.add_item("a", "Rope A", 7.99)
        store.add_item("b", "Rope B", 7.99)
        store.select_all(True)
        assert store.delete_selected() == 2
        assert len(_tracked(tracker, "remove_from_cart")) == 2

    def test_checkout_started(self, store, tracker):
        store.add_item("a", "Rope A", 10.0)
        store.start_checkout()
        event = _tracked(tracker, "checkout_started")[0]
        assert event.data == {"cartValue": 10.0, "itemCount": 1, "currency": "USD"}

    def test_submit_tracks_payment_step(self, store, tracker):
        store.add_item("a", "Rope A", 10.0)
        store.submit_checkout()
        event = _tracked(tracker, "checkout_step")[0]
        assert event.data["step"] == "payment"

    def test_complete_purchase_tracks_conversion(self, store, tracker):
        store.add_item("a", "Rope A", 10.0)
        order_id = store.submit_checkout().order_id
        store.complete_purchase(order_id)
        event = _tracked(tracker, "conversion")[0]
        assert event.data["orderId"] == order_id
        assert event.data["value"] == 10.0
        assert event.data["items"][0]["id"] == "a"

    def test_unknown_order_tracks_nothing(self, store, tracker):
        store.add_item("a", "Rope A", 10.0)
        with pytest.raises(ValidationError):
            store.complete_purchase("ord-1")
        assert _tracked(tracker, "conversion") == []


class TestWithoutTracker:
    def test_store_works_without_analytics(self):
        store = CartStore(validator=FakeDiscountValidator(), submitter=FakeOrderSubmitter(), settings=CartSettings())
        store.add_item("a", "Rope A", 10.0)
        store.start_checkout()
        store.complete_purchase(store.submit_checkout().order_id)
        assert store.cart.item_count == 0
