"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer), separate from the
ShoppingCart aggregate and the CartStore service.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: str
    name: str
    current_price: float = Field(ge=0)
    description: str | None = None
    image: str | None = None
    original_price: float | None = Field(default=None, ge=0)
    discount_percent: int | None = Field(default=None, ge=0, le=100)
    color: str | None = None
    category: str | None = None
    sku: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "rope-sour-apple",
                    "name": "Sour Apple Rope",
                    "current_price": 7.99,
                    "category": "ropes",
                }
            ]
        }
    }


class UpdateQuantityRequest(BaseModel):
    # Values below 1 are clamped by the cart, not rejected
    quantity: int


class SelectionRequest(BaseModel):
    selected: bool


class ShippingOptionRequest(BaseModel):
    shipping_option: str


class ApplyDiscountRequest(BaseModel):
    code: str


class CheckoutRequest(BaseModel):
    shipping_address: dict | None = None
    notes: str | None = None
    guest_email: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartItemResponse(BaseModel):
    product_id: str
    name: str
    current_price: float
    original_price: float | None = None
    discount_percent: int | None = None
    quantity: int
    selected: bool
    image: str | None = None
    color: str | None = None
    category: str | None = None
    sku: str | None = None


class DiscountResponse(BaseModel):
    code: str
    name: str | None = None
    discount_amount: float


class CartResponse(BaseModel):
    session_id: str
    items: list[CartItemResponse]
    item_count: int
    all_selected: bool
    some_selected: bool
    shipping_option: str
    subtotal: float
    shipping_cost: float
    discount_amount: float
    total: float
    discount: DiscountResponse | None = None
    discount_status: str
    discount_error: str | None = None
    discount_is_stale: bool
    volume_tier: str
    volume_savings: float
    next_tier_message: str | None = None


class DiscountResultResponse(BaseModel):
    success: bool
    code: str | None = None
    discount_amount: float = 0.0
    message: str | None = None
    cart: CartResponse


class CheckoutResponse(BaseModel):
    success: bool
    order_id: str | None = None
    order_number: str | None = None
    error: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
