"""Configurable fake order submitter for development and testing."""

from uuid import uuid4

from checkout.orders.port import OrderSubmissionResult, OrderSubmitter


class FakeOrderSubmitter(OrderSubmitter):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Order service unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Order service unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def submit(self, payload: dict) -> OrderSubmissionResult:
        self.calls.append(payload)

        if not self.should_succeed:
            return OrderSubmissionResult(success=False, failure_reason=self.failure_reason)

        suffix = uuid4().hex[:8]
        return OrderSubmissionResult(
            success=True,
            order_id=f"fake_ord_{suffix}",
            order_number=f"LIC-{suffix.upper()}",
        )
