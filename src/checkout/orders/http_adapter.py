"""Order submission against the storefront backend (``POST /orders``)."""

import structlog

from checkout.client import ApiClient, ApiError
from checkout.orders.port import OrderSubmissionResult, OrderSubmitter

logger = structlog.get_logger(__name__)


class HttpOrderSubmitter(OrderSubmitter):
    def __init__(self, client: ApiClient | None = None) -> None:
        self.client = client or ApiClient()

    def submit(self, payload: dict) -> OrderSubmissionResult:
        try:
            body = self.client.post("/orders", payload)
        except ApiError as exc:
            logger.warning("Order submission failed", reason=exc.message, status=exc.status_code)
            return OrderSubmissionResult(success=False, failure_reason=exc.message)

        data = body.get("data") or {}
        order = data.get("order") or data
        order_id = order.get("id")
        if order_id is None:
            return OrderSubmissionResult(success=False, failure_reason="Order reference missing from response")

        return OrderSubmissionResult(
            success=True,
            order_id=str(order_id),
            order_number=order.get("orderNumber"),
        )
