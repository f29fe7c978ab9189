"""FastAPI routes for the Checkout domain, one cart per browser session.

The session is identified by the ``X-Session-Id`` header. Adding an item
opens a cart for an unknown session; every other route answers 404 until
then.

Routes that can reach the storefront API or the analytics collector are
plain functions so Starlette runs them in its threadpool. CartStore locks
its own state, so concurrent requests for one session stay consistent.
"""

import threading

import structlog
from fastapi import APIRouter, Header, HTTPException
from protean.exceptions import ValidationError

from checkout.api.schemas import (
    AddCartItemRequest,
    ApplyDiscountRequest,
    CartItemResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    DiscountResultResponse,
    SelectionRequest,
    ShippingOptionRequest,
    StatusResponse,
    UpdateQuantityRequest,
)
from checkout.store import CartStore

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Session registry
# ---------------------------------------------------------------------------
class CartSessions:
    """In-memory carts keyed by session id."""

    def __init__(self) -> None:
        self._stores: dict[str, CartStore] = {}
        self._lock = threading.Lock()
        self.tracker = None

    def get(self, session_id: str) -> CartStore | None:
        with self._lock:
            return self._stores.get(session_id)

    def get_or_create(self, session_id: str) -> CartStore:
        with self._lock:
            store = self._stores.get(session_id)
            if store is None:
                store = CartStore(session_id=session_id, tracker=self.tracker)
                self._stores[session_id] = store
                logger.info("Cart opened", session_id=session_id)
            return store

    def reset(self) -> None:
        with self._lock:
            self._stores.clear()


sessions = CartSessions()


def _store_for(session_id: str) -> CartStore:
    store = sessions.get(session_id)
    if store is None:
        raise HTTPException(status_code=404, detail=f"No cart for session {session_id}")
    return store


def _cart_response(store: CartStore) -> CartResponse:
    with store.lock:
        summary = store.summary()
        items = [
            CartItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                current_price=item.current_price,
                original_price=item.original_price,
                discount_percent=item.discount_percent,
                quantity=item.quantity,
                selected=bool(item.selected),
                image=item.image,
                color=item.color,
                category=item.category,
                sku=item.sku,
            )
            for item in store.items
        ]
    return CartResponse(session_id=store.cart.session_id, items=items, **summary)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(x_session_id: str = Header(...)) -> CartResponse:
    return _cart_response(_store_for(x_session_id))


@cart_router.post("/items", status_code=201, response_model=CartResponse)
def add_cart_item(body: AddCartItemRequest, x_session_id: str = Header(...)) -> CartResponse:
    """Add a product, or bump its quantity by one if it is already in the cart."""
    store = sessions.get_or_create(x_session_id)
    try:
        store.add_item(**body.model_dump())
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc
    return _cart_response(store)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item_quantity(
    product_id: str, body: UpdateQuantityRequest, x_session_id: str = Header(...)
) -> CartResponse:
    store = _store_for(x_session_id)
    store.change_quantity(product_id, body.quantity)
    return _cart_response(store)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
def remove_cart_item(product_id: str, x_session_id: str = Header(...)) -> CartResponse:
    store = _store_for(x_session_id)
    store.remove_item(product_id)
    return _cart_response(store)


@cart_router.put("/items/{product_id}/selection", response_model=CartResponse)
async def select_cart_item(product_id: str, body: SelectionRequest, x_session_id: str = Header(...)) -> CartResponse:
    store = _store_for(x_session_id)
    store.set_item_selected(product_id, body.selected)
    return _cart_response(store)


@cart_router.post("/select-all", response_model=CartResponse)
async def select_all_items(body: SelectionRequest, x_session_id: str = Header(...)) -> CartResponse:
    store = _store_for(x_session_id)
    store.select_all(body.selected)
    return _cart_response(store)


@cart_router.post("/delete-selected", response_model=CartResponse)
def delete_selected_items(x_session_id: str = Header(...)) -> CartResponse:
    store = _store_for(x_session_id)
    store.delete_selected()
    return _cart_response(store)


@cart_router.put("/shipping", response_model=CartResponse)
async def set_shipping_option(body: ShippingOptionRequest, x_session_id: str = Header(...)) -> CartResponse:
    store = _store_for(x_session_id)
    try:
        store.set_shipping_option(body.shipping_option)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc
    return _cart_response(store)


@cart_router.post("/discount", response_model=DiscountResultResponse)
def apply_discount(body: ApplyDiscountRequest, x_session_id: str = Header(...)) -> DiscountResultResponse:
    """Validate a discount code against the current subtotal.

    A rejected code is not an HTTP error: the response carries
    ``success=false`` and the message to show next to the input.
    """
    store = _store_for(x_session_id)
    try:
        result = store.apply_discount_code(body.code)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc

    return DiscountResultResponse(
        success=result.success,
        code=result.code,
        discount_amount=result.discount_amount if result.success else 0.0,
        message=None if result.success else result.failure_reason,
        cart=_cart_response(store),
    )


@cart_router.delete("/discount", response_model=CartResponse)
async def remove_discount(x_session_id: str = Header(...)) -> CartResponse:
    store = _store_for(x_session_id)
    store.remove_discount()
    return _cart_response(store)


@cart_router.post("/checkout", response_model=CheckoutResponse)
def checkout(body: CheckoutRequest, x_session_id: str = Header(...)) -> CheckoutResponse:
    store = _store_for(x_session_id)
    try:
        result = store.submit_checkout(
            shipping_address=body.shipping_address,
            notes=body.notes,
            guest_email=body.guest_email,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc

    return CheckoutResponse(
        success=result.success,
        order_id=result.order_id,
        order_number=result.order_number,
        error=result.error,
    )


@cart_router.post("/checkout/{order_id}/complete", response_model=StatusResponse)
def complete_purchase(order_id: str, x_session_id: str = Header(...)) -> StatusResponse:
    """Payment confirmed for ``order_id``: record the purchase and empty the cart."""
    store = _store_for(x_session_id)
    try:
        store.complete_purchase(order_id)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc
    return StatusResponse()
