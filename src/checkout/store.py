"""CartStore is the service the storefront UI talks to.

One store wraps one ShoppingCart together with the collaborators it needs:
the discount validator, the order submitter and, optionally, the analytics
tracker. Item mutations are local and synchronous; only discount validation
and checkout go over the network, and their failures come back as messages
rather than exceptions.
"""

import threading
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from checkout.cart.cart import ShoppingCart
from checkout.cart.pricing import next_tier_message, volume_quote
from checkout.config import CartSettings
from checkout.discounts import get_validator
from checkout.discounts.port import DiscountValidationResult, DiscountValidator
from checkout.orders import get_submitter
from checkout.orders.port import OrderSubmitter
from tracking.ecommerce import EcommerceTracker

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    success: bool
    order_id: str | None = None
    order_number: str | None = None
    error: str | None = None


class CartStore:
    def __init__(
        self,
        cart: ShoppingCart | None = None,
        validator: DiscountValidator | None = None,
        submitter: OrderSubmitter | None = None,
        settings: CartSettings | None = None,
        tracker=None,
        session_id: str | None = None,
    ) -> None:
        self.cart = cart or ShoppingCart.create(session_id=session_id)
        self.validator = validator or get_validator()
        self.submitter = submitter or get_submitter()
        self.settings = settings or CartSettings.from_env()
        self.ecommerce = EcommerceTracker(tracker)
        self.checkout_error: str | None = None
        # Guards cart state across request threads; never held over network calls
        self.lock = threading.RLock()

    @property
    def items(self):
        return list(self.cart.items)

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def add_item(self, product_id, name, current_price, **details):
        with self.lock:
            item = self.cart.add_item(product_id, name, current_price, **details)
        self.ecommerce.add_to_cart(
            item.product_id,
            item.name,
            item.current_price,
            quantity=item.quantity,
            category=item.category,
            sku=item.sku,
        )
        return item

    def select_all(self, checked):
        with self.lock:
            self.cart.select_all(checked)

    def set_item_selected(self, product_id, selected):
        with self.lock:
            self.cart.set_item_selected(product_id, selected)

    def change_quantity(self, product_id, quantity):
        with self.lock:
            self.cart.change_quantity(product_id, quantity)

    def remove_item(self, product_id):
        with self.lock:
            item = self.cart.remove_item(product_id)
        if item is not None:
            self.ecommerce.remove_from_cart(item.product_id, item.name, item.current_price, item.quantity)

    def delete_selected(self):
        """Remove all selected items. Asking the shopper to confirm is the caller's job."""
        with self.lock:
            removed = self.cart.delete_selected()
        for item in removed:
            self.ecommerce.remove_from_cart(item.product_id, item.name, item.current_price, item.quantity)
        return len(removed)

    def clear(self):
        with self.lock:
            self.cart.clear()

    def set_shipping_option(self, option):
        with self.lock:
            self.cart.change_shipping_option(option)

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def totals(self):
        return self.cart.totals(
            selected_only=self.settings.subtotal_selected_only,
            floor_at_zero=self.settings.floor_total_at_zero,
        )

    def summary(self) -> dict:
        with self.lock:
            totals = self.totals()
            quote = volume_quote(item.quantity for item in self.cart.items)
            discount = self.cart.applied_discount
            return {
                "item_count": self.cart.item_count,
                "all_selected": self.cart.all_selected,
                "some_selected": self.cart.some_selected,
                "shipping_option": self.cart.shipping_option,
                "subtotal": totals.subtotal,
                "shipping_cost": totals.shipping_cost,
                "discount_amount": totals.discount_amount,
                "total": totals.total,
                "discount": (
                    {"code": discount.code, "name": discount.name, "discount_amount": discount.discount_amount}
                    if discount is not None
                    else None
                ),
                "discount_status": self.cart.discount_status,
                "discount_error": self.cart.discount_error,
                "discount_is_stale": self.cart.is_discount_stale(self.settings.subtotal_selected_only),
                "volume_tier": quote.applied_tier,
                "volume_savings": quote.savings,
                "next_tier_message": next_tier_message(quote.total_quantity),
            }

    # -------------------------------------------------------------------
    # Discounts
    # -------------------------------------------------------------------
    def apply_discount_code(self, code, subtotal=None) -> DiscountValidationResult:
        """Validate ``code`` against ``subtotal`` and apply it on success.

        A failed validation leaves any previously applied discount in place.
        Raises ValidationError for an empty code or while another validation
        is still in flight.
        """
        return self._validate_discount(code, subtotal, revalidating=False)

    def revalidate_discount(self):
        """Re-run validation of the applied code against the current subtotal.

        Unlike a fresh apply, a rejection here drops the applied discount.
        """
        discount = self.cart.applied_discount
        if discount is None:
            return None
        return self._validate_discount(discount.code, None, revalidating=True)

    def _validate_discount(self, code, subtotal, revalidating) -> DiscountValidationResult:
        with self.lock:
            token = self.cart.start_discount_validation(code)
            code = self.cart.discount_code
            if subtotal is None:
                subtotal = self.totals().subtotal

        logger.info("Validating discount code", code=code, order_amount=subtotal, revalidating=revalidating)

        try:
            result = self.validator.validate(code, subtotal)
        except Exception as exc:
            logger.error("Discount validation crashed", code=code, error=str(exc))
            result = DiscountValidationResult(success=False, code=code, failure_reason="Could not validate discount code")

        with self.lock:
            if result.success:
                try:
                    applied = self.cart.record_discount_applied(
                        token,
                        code=result.code or code,
                        discount_amount=result.discount_amount,
                        validated_subtotal=subtotal,
                        name=result.name,
                        minimum_amount=result.minimum_amount,
                        maximum_discount=result.maximum_discount,
                    )
                except ValidationError as exc:
                    logger.warning("Discount response rejected", code=code, errors=exc.messages)
                    result = DiscountValidationResult(success=False, code=code, failure_reason="Invalid discount code")
                else:
                    if applied:
                        logger.info("Discount applied", code=code, discount_amount=result.discount_amount)
                    return result

            if revalidating:
                self.cart.record_discount_invalidated(token, result.failure_reason)
                logger.info("Discount no longer valid", code=code, reason=result.failure_reason)
            else:
                self.cart.record_discount_rejected(token, result.failure_reason)
                logger.info("Discount rejected", code=code, reason=result.failure_reason)

        return result

    def remove_discount(self):
        with self.lock:
            self.cart.remove_discount()

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def start_checkout(self):
        with self.lock:
            cart_value, item_count = self.totals().subtotal, self.cart.item_count
        self.ecommerce.checkout_started(cart_value=cart_value, item_count=item_count)

    def build_order_payload(self, shipping_address=None, notes=None, guest_email=None) -> dict:
        totals = self.totals()
        lines = [i for i in self.cart.items if i.selected] if self.settings.subtotal_selected_only else self.cart.items
        discount = self.cart.applied_discount
        return {
            "orderItems": [
                {
                    "productId": str(item.product_id),
                    "productName": item.name,
                    "quantity": item.quantity,
                    "price": item.current_price,
                    "total": item.current_price * item.quantity,
                }
                for item in lines
            ],
            "items": [{"productId": str(item.product_id), "quantity": item.quantity} for item in lines],
            "shippingOption": self.cart.shipping_option,
            "shippingCost": totals.shipping_cost,
            "discountCode": discount.code if discount is not None else None,
            "discountAmount": totals.discount_amount,
            "subtotal": totals.subtotal,
            "total": totals.total,
            "orderNotes": notes or "Order from website",
            "shippingAddress": shipping_address,
            "guestEmail": guest_email,
        }

    def submit_checkout(self, shipping_address=None, notes=None, guest_email=None) -> CheckoutResult:
        """Send the cart to the backend as an order.

        The cart is left untouched on failure so the shopper can retry; no
        automatic retry happens here.
        """
        with self.lock:
            self.cart.assert_can_checkout()
            payload = self.build_order_payload(shipping_address, notes, guest_email)
            item_count = self.cart.item_count
        self.ecommerce.checkout_step(
            "payment",
            cartValue=payload["total"],
            itemCount=item_count,
            shippingCost=payload["shippingCost"],
        )

        try:
            result = self.submitter.submit(payload)
        except Exception as exc:
            logger.error("Order submission crashed", error=str(exc))
            self.checkout_error = "Could not place your order. Please try again."
            return CheckoutResult(success=False, error=self.checkout_error)

        if not result.success:
            self.checkout_error = result.failure_reason or "Could not place your order. Please try again."
            logger.warning("Checkout failed", reason=self.checkout_error)
            return CheckoutResult(success=False, error=self.checkout_error)

        self.checkout_error = None
        with self.lock:
            self.cart.record_checkout(result.order_id, payload["total"])
        logger.info("Checkout submitted", order_id=result.order_id, total=payload["total"])
        return CheckoutResult(success=True, order_id=result.order_id, order_number=result.order_number)

    def complete_purchase(self, order_id):
        """Payment went through: report the conversion and empty the cart.

        Raises ValidationError unless ``order_id`` is the order this cart last
        checked out.
        """
        with self.lock:
            if self.cart.last_order_id is None or str(order_id) != str(self.cart.last_order_id):
                raise ValidationError({"order_id": [f"Order {order_id} was not placed from this cart"]})

            totals = self.totals()
            items = [
                {
                    "id": str(item.product_id),
                    "name": item.name,
                    "price": item.current_price,
                    "quantity": item.quantity,
                    "category": item.category,
                }
                for item in self.cart.items
            ]
            self.cart.clear()
            if self.cart.applied_discount is not None:
                self.cart.remove_discount()
            self.cart.last_order_id = None

        self.ecommerce.purchase(
            order_id=str(order_id),
            value=totals.total,
            items=items,
            shipping=totals.shipping_cost,
            discount=totals.discount_amount,
        )
