"""Discount validation port (abstract interface).

The backend owns discount rules: it checks the code, the order amount against
the minimum, and computes the amount to take off. The cart only trusts the
answer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DiscountValidationResult:
    """Outcome of asking the backend to validate a code against a subtotal."""

    success: bool
    code: str | None = None
    name: str | None = None
    discount_amount: float = 0.0
    minimum_amount: float | None = None
    maximum_discount: float | None = None
    failure_reason: str | None = None


class DiscountValidator(ABC):
    """Abstract discount validation interface."""

    @abstractmethod
    def validate(self, code: str, order_amount: float) -> DiscountValidationResult:
        """Validate ``code`` for an order of ``order_amount``."""
        ...
