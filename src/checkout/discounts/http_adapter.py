"""Discount validation against the storefront backend (``POST /discounts/validate``)."""

import structlog

from checkout.client import ApiClient, ApiError
from checkout.discounts.port import DiscountValidationResult, DiscountValidator

logger = structlog.get_logger(__name__)


class HttpDiscountValidator(DiscountValidator):
    def __init__(self, client: ApiClient | None = None) -> None:
        self.client = client or ApiClient()

    def validate(self, code: str, order_amount: float) -> DiscountValidationResult:
        try:
            body = self.client.post("/discounts/validate", {"code": code, "orderAmount": order_amount})
        except ApiError as exc:
            logger.info("Discount code rejected", code=code, reason=exc.message)
            return DiscountValidationResult(success=False, code=code, failure_reason=exc.message)

        discount = (body.get("data") or {}).get("discount") or {}
        if not discount:
            return DiscountValidationResult(success=False, code=code, failure_reason="Invalid discount code")

        return DiscountValidationResult(
            success=True,
            code=discount.get("code", code),
            name=discount.get("name"),
            discount_amount=float(discount.get("discountAmount") or 0.0),
            minimum_amount=discount.get("minimumAmount"),
            maximum_discount=discount.get("maximumDiscount"),
        )
