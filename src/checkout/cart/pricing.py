"""Cart pricing: checkout totals, shipping options and rope volume tiers.

Everything here is pure: totals are derived from the cart on every read and
never stored on the aggregate.
"""

import math
from dataclasses import dataclass
from enum import Enum


class ShippingOption(Enum):
    FREE = "free"
    FLAT = "flat"
    PICKUP = "pickup"


SHIPPING_COSTS = {
    ShippingOption.FREE: 0.0,
    ShippingOption.FLAT: 8.0,
    ShippingOption.PICKUP: 6.0,
}


def shipping_cost_for(option) -> float:
    """Fixed cost for a shipping option (enum member or its string value)."""
    return SHIPPING_COSTS[ShippingOption(option)]


@dataclass(frozen=True)
class CartTotals:
    """Checkout figures shown next to the cart."""

    subtotal: float
    shipping_cost: float
    discount_amount: float
    total: float


def compute_totals(items, shipping_option, discount=None, selected_only=False, floor_at_zero=False) -> CartTotals:
    """Derive subtotal, shipping, discount and total for a list of cart items.

    The subtotal covers every item unless ``selected_only`` is set, so
    unselected lines still count towards the total by default. The total is
    allowed to go negative unless ``floor_at_zero`` is set.
    """
    lines = [item for item in items if item.selected] if selected_only else list(items)
    subtotal = sum(item.current_price * item.quantity for item in lines)
    shipping_cost = shipping_cost_for(shipping_option)
    discount_amount = discount.discount_amount if discount is not None and discount.discount_amount else 0.0

    total = subtotal + shipping_cost - discount_amount
    if floor_at_zero:
        total = max(total, 0.0)

    return CartTotals(
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        discount_amount=discount_amount,
        total=total,
    )


# ---------------------------------------------------------------------------
# Volume pricing (southern sweet and sour ropes)
# ---------------------------------------------------------------------------
BASE_ROPE_PRICE = 7.99


@dataclass(frozen=True)
class VolumeTier:
    min_quantity: int
    max_quantity: float
    price: float
    label: str


VOLUME_TIERS = (
    VolumeTier(1, 2, 7.99, "1-2 ropes"),
    VolumeTier(3, 5, 6.99, "3-5 ropes"),
    VolumeTier(6, 10, 6.49, "6-10 ropes"),
    VolumeTier(11, math.inf, 5.99, "11+ ropes"),
)


@dataclass(frozen=True)
class VolumeQuote:
    """What the cart would cost if every rope were billed at its tier price."""

    total_quantity: int
    price_per_unit: float
    applied_tier: str
    original_subtotal: float
    subtotal: float
    savings: float


def _tier_index(total_quantity):
    for index, tier in enumerate(VOLUME_TIERS):
        if tier.min_quantity <= total_quantity <= tier.max_quantity:
            return index
    return None


def price_per_unit(total_quantity: int) -> float:
    index = _tier_index(total_quantity)
    return VOLUME_TIERS[index].price if index is not None else BASE_ROPE_PRICE


def tier_label(total_quantity: int) -> str:
    index = _tier_index(total_quantity)
    return VOLUME_TIERS[index].label if index is not None else ""


def volume_quote(quantities) -> VolumeQuote:
    """Price a list of line quantities with the tier matching their sum."""
    quantities = list(quantities)
    total_quantity = sum(quantities)
    unit_price = price_per_unit(total_quantity)
    original_subtotal = sum(BASE_ROPE_PRICE * quantity for quantity in quantities)
    subtotal = sum(unit_price * quantity for quantity in quantities)
    return VolumeQuote(
        total_quantity=total_quantity,
        price_per_unit=unit_price,
        applied_tier=tier_label(total_quantity),
        original_subtotal=original_subtotal,
        subtotal=subtotal,
        savings=original_subtotal - subtotal,
    )


def next_tier_message(total_quantity: int) -> str | None:
    """Nudge towards the next volume tier, or None at the top tier."""
    index = _tier_index(total_quantity)
    if index is None or index == len(VOLUME_TIERS) - 1:
        return None

    current_price = VOLUME_TIERS[index].price
    next_tier = VOLUME_TIERS[index + 1]
    items_needed = next_tier.min_quantity - total_quantity
    savings_per_unit = current_price - next_tier.price

    if items_needed == 1:
        return f"Add 1 more rope and save ${savings_per_unit:.2f} per rope!"
    return f"Add {items_needed} more ropes and save ${savings_per_unit:.2f} per rope!"
