"""Order submission port (abstract interface).

Checkout ends by handing a snapshot of the cart to the backend, which creates
the order and returns a reference used by the external payment flow.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OrderSubmissionResult:
    """Outcome of an order-creation request."""

    success: bool
    order_id: str | None = None
    order_number: str | None = None
    failure_reason: str | None = None


class OrderSubmitter(ABC):
    """Abstract order submission interface."""

    @abstractmethod
    def submit(self, payload: dict) -> OrderSubmissionResult:
        """Create an order from a checkout payload."""
        ...
