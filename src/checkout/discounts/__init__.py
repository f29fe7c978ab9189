"""Discount validator factory.

Provides get_validator() / set_validator() to swap implementations:
- HttpDiscountValidator against the storefront backend (default)
- FakeDiscountValidator for development and testing
"""

from checkout.discounts.http_adapter import HttpDiscountValidator
from checkout.discounts.port import DiscountValidator

_current_validator: DiscountValidator | None = None


def get_validator() -> DiscountValidator:
    """Return the current discount validator. Defaults to HttpDiscountValidator."""
    global _current_validator
    if _current_validator is None:
        _current_validator = HttpDiscountValidator()
    return _current_validator


def set_validator(validator: DiscountValidator) -> None:
    """Override the active discount validator (useful for tests)."""
    global _current_validator
    _current_validator = validator


def reset_validator() -> None:
    """Reset to default validator."""
    global _current_validator
    _current_validator = None
