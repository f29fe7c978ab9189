"""Shared BDD fixtures and step definitions for the Checkout domain."""

import pytest
from checkout.cart.events import (
    CartCheckedOut,
    CartDiscountApplied,
    CartDiscountRejected,
    CartDiscountRemoved,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartSelectionChanged,
    CartShippingOptionChanged,
)
from checkout.config import CartSettings
from checkout.discounts.fake_adapter import FakeDiscountValidator
from checkout.orders.fake_adapter import FakeOrderSubmitter
from checkout.store import CartStore
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartSelectionChanged": CartSelectionChanged,
    "CartShippingOptionChanged": CartShippingOptionChanged,
    "CartDiscountApplied": CartDiscountApplied,
    "CartDiscountRejected": CartDiscountRejected,
    "CartDiscountRemoved": CartDiscountRemoved,
    "CartCheckedOut": CartCheckedOut,
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def validator():
    return FakeDiscountValidator()


@pytest.fixture()
def submitter():
    return FakeOrderSubmitter()


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def outcome():
    """Container for the last discount or checkout result."""
    return {"result": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="store")
def empty_cart(validator, submitter):
    store = CartStore(validator=validator, submitter=submitter, settings=CartSettings(), session_id="sess-bdd")
    store.cart._events.clear()
    return store


@given(parsers.cfparse('the cart contains "{product_id}" at ${price:f} with quantity {qty:d}'))
def cart_contains(store, product_id, price, qty):
    store.add_item(product_id, f"Rope {product_id}", price)
    store.change_quantity(product_id, qty)
    store.cart._events.clear()


@given(parsers.cfparse('the discount code "{code}" is worth ${amount:f}'))
def discount_code_registered(validator, code, amount):
    validator.register(code, amount)


@given(parsers.cfparse('the discount code "{code}" is worth ${amount:f} above ${minimum:f}'))
def discount_code_with_minimum(validator, code, amount, minimum):
    validator.register(code, amount, minimum_amount=minimum)


@given(parsers.cfparse('shipping is "{option}"'))
def shipping_is(store, option):
    store.set_shipping_option(option)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the subtotal is ${amount:f}"))
def subtotal_is(store, amount):
    assert store.totals().subtotal == pytest.approx(amount)


@then(parsers.cfparse("the total is ${amount:f}"))
def total_is(store, amount):
    assert store.totals().total == pytest.approx(amount)


@then(parsers.cfparse("the total is -${amount:f}"))
def total_is_negative(store, amount):
    assert store.totals().total == pytest.approx(-amount)


@then(parsers.cfparse("the cart holds {count:d} items"))
def cart_holds(store, count):
    assert store.cart.item_count == count


@then(parsers.cfparse('the discount status is "{status}"'))
def discount_status_is(store, status):
    assert store.cart.discount_status == status


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(store, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in store.cart._events)
