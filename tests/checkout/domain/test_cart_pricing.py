"""Tests for checkout totals, shipping and volume pricing."""

import pytest
from checkout.cart.cart import ShoppingCart
from checkout.cart.pricing import (
    ShippingOption,
    compute_totals,
    next_tier_message,
    price_per_unit,
    shipping_cost_for,
    tier_label,
    volume_quote,
)
from protean.exceptions import ValidationError


def _cart(lines, shipping="free"):
    cart = ShoppingCart.create(session_id="sess-001")
    for product_id, price, quantity in lines:
        cart.add_item(product_id, f"Product {product_id}", price)
        cart.change_quantity(product_id, quantity)
    cart.change_shipping_option(shipping)
    return cart


class TestShipping:
    def test_shipping_costs(self):
        assert shipping_cost_for(ShippingOption.FREE) == 0.0
        assert shipping_cost_for("flat") == 8.0
        assert shipping_cost_for("pickup") == 6.0

    def test_default_shipping_is_free(self):
        cart = ShoppingCart.create()
        assert cart.shipping_option == ShippingOption.FREE.value

    def test_unknown_option_is_rejected(self):
        cart = ShoppingCart.create()
        with pytest.raises(ValidationError) as exc:
            cart.change_shipping_option("overnight")
        assert "shipping_option" in exc.value.messages
        assert cart.shipping_option == "free"


class TestTotals:
    def test_flat_shipping_without_discount(self):
        cart = _cart([("a", 10.0, 2), ("b", 5.0, 1)], shipping="flat")
        totals = cart.totals()
        assert totals.subtotal == 25.0
        assert totals.shipping_cost == 8.0
        assert totals.discount_amount == 0.0
        assert totals.total == 33.0

    def test_subtotal_ignores_selection_by_default(self):
        cart = _cart([("a", 10.0, 2), ("b", 5.0, 1)])
        cart.set_item_selected("a", True)
        assert cart.totals().subtotal == 25.0

    def test_subtotal_selected_only(self):
        cart = _cart([("a", 10.0, 2), ("b", 5.0, 1)])
        cart.set_item_selected("b", True)
        assert cart.totals(selected_only=True).subtotal == 5.0

    def test_discount_is_subtracted(self):
        cart = _cart([("a", 10.0, 2), ("b", 5.0, 1)], shipping="flat")
        token = cart.start_discount_validation("save5")
        cart.record_discount_applied(token, "SAVE5", 5.0, validated_subtotal=25.0)
        assert cart.totals().total == 28.0

    def test_total_may_go_negative(self):
        cart = _cart([("a", 10.0, 1)])
        token = cart.start_discount_validation("BIG")
        cart.record_discount_applied(token, "BIG", 50.0, validated_subtotal=10.0)
        assert cart.totals().total == -40.0

    def test_total_floored_at_zero_when_requested(self):
        cart = _cart([("a", 10.0, 1)])
        token = cart.start_discount_validation("BIG")
        cart.record_discount_applied(token, "BIG", 50.0, validated_subtotal=10.0)
        assert cart.totals(floor_at_zero=True).total == 0.0

    def test_remove_discount_restores_total_exactly(self):
        cart = _cart([("a", 19.99, 3), ("b", 0.1, 7)], shipping="flat")
        before = cart.totals().total
        token = cart.start_discount_validation("TEN")
        cart.record_discount_applied(token, "TEN", 10.37, validated_subtotal=cart.totals().subtotal)
        cart.remove_discount()
        assert cart.totals().total == before

    def test_empty_cart_totals(self):
        totals = compute_totals([], "flat")
        assert totals.subtotal == 0
        assert totals.total == 8.0


class TestVolumePricing:
    @pytest.mark.parametrize(
        "quantity, price, label",
        [
            (1, 7.99, "1-2 ropes"),
            (2, 7.99, "1-2 ropes"),
            (3, 6.99, "3-5 ropes"),
            (6, 6.49, "6-10 ropes"),
            (10, 6.49, "6-10 ropes"),
            (11, 5.99, "11+ ropes"),
            (250, 5.99, "11+ ropes"),
        ],
    )
    def test_tier_boundaries(self, quantity, price, label):
        assert price_per_unit(quantity) == price
        assert tier_label(quantity) == label

    def test_empty_quantity_has_no_tier(self):
        assert price_per_unit(0) == 7.99
        assert tier_label(0) == ""

    def test_volume_quote_savings(self):
        quote = volume_quote([2, 2])
        assert quote.total_quantity == 4
        assert quote.price_per_unit == 6.99
        assert quote.subtotal == pytest.approx(27.96)
        assert quote.savings == pytest.approx(4.0)

    def test_next_tier_message_singular(self):
        assert next_tier_message(2) == "Add 1 more rope and save $1.00 per rope!"

    def test_next_tier_message_plural(self):
        assert next_tier_message(7) == "Add 4 more ropes and save $0.50 per rope!"

    def test_no_message_at_top_tier(self):
        assert next_tier_message(11) is None

    def test_no_message_for_empty_cart(self):
        assert next_tier_message(0) is None
