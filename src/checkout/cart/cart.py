"""Shopping Cart aggregate, the storefront cart that feeds checkout.

The cart holds the line items a shopper has picked, their selection state for
bulk actions, the chosen shipping option and at most one validated discount.
Totals are never stored; they are derived through ``checkout.cart.pricing``.

Discount state machine:
    IDLE → VALIDATING → APPLIED | ERROR
    APPLIED/ERROR → VALIDATING (re-apply)
    any → IDLE (remove_discount)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

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
from checkout.cart.pricing import ShippingOption, compute_totals
from checkout.domain import checkout


class DiscountStatus(Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    APPLIED = "Applied"
    ERROR = "Error"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@checkout.value_object(part_of="ShoppingCart")
class DiscountApplication:
    """A discount code accepted by the backend for a given subtotal.

    The amount is computed server-side and trusted as-is. Minimum order and
    maximum discount constraints are enforced by the backend; they are kept
    here for display only.
    """

    code = String(required=True, max_length=100)
    name = String(max_length=255)
    discount_amount = Float(required=True, min_value=0.0)
    minimum_amount = Float()
    maximum_discount = Float()
    validated_subtotal = Float()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="ShoppingCart")
class CartItem:
    """One product line in the cart.

    ``product_id`` is issued by the catalogue and may be numeric or a CUID;
    it is always stored and compared in its string form.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = String(max_length=1000)
    image = String(max_length=500)
    current_price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    discount_percent = Integer(min_value=0, max_value=100)
    quantity = Integer(required=True, min_value=1)
    selected = Boolean(default=False)
    color = String(max_length=50)
    category = String(max_length=100)
    sku = String(max_length=50)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@checkout.aggregate
class ShoppingCart:
    session_id = String(max_length=255)
    items = HasMany(CartItem)
    shipping_option = String(choices=ShippingOption, default=ShippingOption.FREE.value)
    applied_discount = ValueObject(DiscountApplication)
    discount_code = String(max_length=100)  # Code as typed, before validation
    discount_status = String(choices=DiscountStatus, default=DiscountStatus.IDLE.value)
    discount_error = String(max_length=500)
    validation_token = Integer(default=0)
    last_order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id=None):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            shipping_option=ShippingOption.FREE.value,
            discount_status=DiscountStatus.IDLE.value,
            validation_token=0,
            created_at=now,
            updated_at=now,
        )

    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    @property
    def all_selected(self):
        return bool(self.items) and all(item.selected for item in self.items)

    @property
    def some_selected(self):
        return any(item.selected for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(
        self,
        product_id,
        name,
        current_price,
        description=None,
        image=None,
        original_price=None,
        discount_percent=None,
        color=None,
        category=None,
        sku=None,
    ):
        """Add a product at quantity 1, or bump its quantity by one."""
        existing = self._find(product_id)
        if existing:
            existing.quantity += 1
            item = existing
        else:
            item = CartItem(
                product_id=str(product_id),
                name=name,
                description=description,
                image=image,
                current_price=current_price,
                original_price=original_price,
                discount_percent=discount_percent,
                quantity=1,
                selected=False,
                color=color,
                category=category,
                sku=sku,
            )
            self.add_items(item)

        self._touch()
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=item.quantity,
            )
        )
        return item

    def change_quantity(self, product_id, quantity):
        """Set an item's quantity, clamping anything below 1 up to 1.

        Stock limits are not checked here; the backend enforces them when the
        order is submitted.
        """
        item = self._find(product_id)
        if item is None:
            return

        previous_quantity = item.quantity
        item.quantity = max(1, int(quantity))
        self._touch()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=item.quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove an item. Removing an absent item is a no-op."""
        item = self._find(product_id)
        if item is None:
            return None

        self.remove_items(item)
        self._touch()
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(item.product_id)))
        return item

    def delete_selected(self):
        """Remove every selected item and return what was removed."""
        removed = [item for item in self.items if item.selected]
        for item in removed:
            self.remove_items(item)
            self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(item.product_id)))
        if removed:
            self._touch()
        return removed

    def clear(self):
        for item in list(self.items):
            self.remove_items(item)
            self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(item.product_id)))
        self._touch()

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def select_all(self, checked):
        for item in self.items:
            item.selected = bool(checked)
        self._touch()
        self.raise_(
            CartSelectionChanged(
                cart_id=str(self.id),
                selected=bool(checked),
                affected_count=len(self.items),
            )
        )

    def set_item_selected(self, product_id, selected):
        item = self._find(product_id)
        if item is None:
            return

        item.selected = bool(selected)
        self._touch()
        self.raise_(
            CartSelectionChanged(
                cart_id=str(self.id),
                selected=bool(selected),
                affected_count=1,
            )
        )

    # -------------------------------------------------------------------
    # Shipping
    # -------------------------------------------------------------------
    def change_shipping_option(self, option):
        try:
            option = ShippingOption(option)
        except ValueError:
            raise ValidationError({"shipping_option": [f"Unknown shipping option: {option}"]}) from None

        self.shipping_option = option.value
        self._touch()
        self.raise_(CartShippingOptionChanged(cart_id=str(self.id), shipping_option=option.value))

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def totals(self, selected_only=False, floor_at_zero=False):
        return compute_totals(
            self.items,
            self.shipping_option,
            self.applied_discount,
            selected_only=selected_only,
            floor_at_zero=floor_at_zero,
        )

    @property
    def discount_is_stale(self):
        return self.is_discount_stale()

    def is_discount_stale(self, selected_only=False):
        """True once the subtotal has moved away from the one the discount was validated for.

        ``selected_only`` must match the setting the discount was validated under.
        """
        if self.applied_discount is None or self.applied_discount.validated_subtotal is None:
            return False
        subtotal = self.totals(selected_only=selected_only).subtotal
        return round(subtotal, 2) != round(self.applied_discount.validated_subtotal, 2)

    # -------------------------------------------------------------------
    # Discount management
    # -------------------------------------------------------------------
    def start_discount_validation(self, code):
        """Enter VALIDATING for ``code`` and return the fencing token for this attempt."""
        code = (code or "").strip().upper()
        if not code:
            raise ValidationError({"discount_code": ["Please enter a discount code"]})
        if DiscountStatus(self.discount_status) == DiscountStatus.VALIDATING:
            raise ValidationError({"discount_code": ["A discount code is already being validated"]})

        self.discount_code = code
        self.discount_error = None
        self.discount_status = DiscountStatus.VALIDATING.value
        self.validation_token = (self.validation_token or 0) + 1
        return self.validation_token

    def record_discount_applied(
        self,
        token,
        code,
        discount_amount,
        validated_subtotal,
        name=None,
        minimum_amount=None,
        maximum_discount=None,
    ):
        """Store a validated discount. Returns False if ``token`` was superseded."""
        if token != self.validation_token:
            return False

        self.applied_discount = DiscountApplication(
            code=code.upper(),
            name=name,
            discount_amount=discount_amount,
            minimum_amount=minimum_amount,
            maximum_discount=maximum_discount,
            validated_subtotal=validated_subtotal,
        )
        self.discount_code = code.upper()
        self.discount_status = DiscountStatus.APPLIED.value
        self.discount_error = None
        self._touch()

        self.raise_(
            CartDiscountApplied(
                cart_id=str(self.id),
                code=code.upper(),
                discount_amount=discount_amount,
            )
        )
        return True

    def record_discount_rejected(self, token, reason):
        """Record a failed validation. Any previously applied discount is kept."""
        if token != self.validation_token:
            return False

        self.discount_status = DiscountStatus.ERROR.value
        self.discount_error = reason or "Invalid discount code"
        self._touch()

        self.raise_(
            CartDiscountRejected(
                cart_id=str(self.id),
                code=self.discount_code or "",
                reason=self.discount_error,
            )
        )
        return True

    def record_discount_invalidated(self, token, reason):
        """Revalidation failed: the applied discount no longer qualifies and is dropped."""
        if token != self.validation_token:
            return False

        previous = self.applied_discount
        self.applied_discount = None
        self.discount_status = DiscountStatus.ERROR.value
        self.discount_error = reason or "Invalid discount code"
        self._touch()

        self.raise_(
            CartDiscountRejected(
                cart_id=str(self.id),
                code=self.discount_code or "",
                reason=self.discount_error,
            )
        )
        if previous is not None:
            self.raise_(CartDiscountRemoved(cart_id=str(self.id), code=previous.code))
        return True

    def remove_discount(self):
        previous = self.applied_discount
        self.applied_discount = None
        self.discount_code = None
        self.discount_error = None
        self.discount_status = DiscountStatus.IDLE.value
        # Results of an in-flight validation must not resurrect the discount
        self.validation_token = (self.validation_token or 0) + 1
        self._touch()

        if previous is not None:
            self.raise_(CartDiscountRemoved(cart_id=str(self.id), code=previous.code))

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def assert_can_checkout(self):
        if not self.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

    def record_checkout(self, order_id, total):
        self.last_order_id = str(order_id)
        self._touch()
        self.raise_(CartCheckedOut(cart_id=str(self.id), order_id=str(order_id), total=total))
