"""Configurable fake discount validator for development and testing.

Codes are registered with a fixed amount and an optional minimum order.
Everything else is rejected the way the backend would reject it.
"""

from checkout.discounts.port import DiscountValidationResult, DiscountValidator


class FakeDiscountValidator(DiscountValidator):
    def __init__(self) -> None:
        self.codes: dict[str, dict] = {}
        self.should_succeed: bool = True
        self.failure_reason: str = "Discount service unavailable"
        self.calls: list[dict] = []

    def register(self, code: str, discount_amount: float, name: str | None = None, minimum_amount: float = 0.0):
        self.codes[code.upper()] = {
            "name": name or code.upper(),
            "discount_amount": discount_amount,
            "minimum_amount": minimum_amount,
        }

    def configure(self, should_succeed: bool, failure_reason: str = "Discount service unavailable") -> None:
        """Simulate the backend being unreachable."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def validate(self, code: str, order_amount: float) -> DiscountValidationResult:
        self.calls.append({"code": code, "order_amount": order_amount})

        if not self.should_succeed:
            return DiscountValidationResult(success=False, code=code, failure_reason=self.failure_reason)

        entry = self.codes.get(code.upper())
        if entry is None:
            return DiscountValidationResult(success=False, code=code, failure_reason="Invalid discount code")
        if order_amount < entry["minimum_amount"]:
            return DiscountValidationResult(
                success=False,
                code=code,
                failure_reason=f"Minimum order amount of ${entry['minimum_amount']:.2f} required",
            )

        return DiscountValidationResult(
            success=True,
            code=code.upper(),
            name=entry["name"],
            discount_amount=entry["discount_amount"],
            minimum_amount=entry["minimum_amount"],
        )
