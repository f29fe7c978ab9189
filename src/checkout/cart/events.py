"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart (or its quantity bumped by one)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@checkout.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart item was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@checkout.event(part_of="ShoppingCart")
class CartItemRemoved:
    """An item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@checkout.event(part_of="ShoppingCart")
class CartSelectionChanged:
    """One or more items were (de)selected for bulk actions."""

    __version__ = 1

    cart_id = Identifier(required=True)
    selected = Boolean(required=True)
    affected_count = Integer(required=True)


@checkout.event(part_of="ShoppingCart")
class CartShippingOptionChanged:
    __version__ = 1

    cart_id = Identifier(required=True)
    shipping_option = String(required=True)


@checkout.event(part_of="ShoppingCart")
class CartDiscountApplied:
    """A discount code was validated by the backend and applied to the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    code = String(required=True)
    discount_amount = Float(required=True)


@checkout.event(part_of="ShoppingCart")
class CartDiscountRejected:
    """The backend refused a discount code."""

    __version__ = 1

    cart_id = Identifier(required=True)
    code = String(required=True)
    reason = String()


@checkout.event(part_of="ShoppingCart")
class CartDiscountRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    code = String(required=True)


@checkout.event(part_of="ShoppingCart")
class CartCheckedOut:
    """The cart was submitted to the backend as an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
    total = Float(required=True)
