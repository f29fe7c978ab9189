"""Order submitter factory.

Provides get_submitter() / set_submitter() to swap implementations:
- HttpOrderSubmitter against the storefront backend (default)
- FakeOrderSubmitter for development and testing
"""

from checkout.orders.http_adapter import HttpOrderSubmitter
from checkout.orders.port import OrderSubmitter

_current_submitter: OrderSubmitter | None = None


def get_submitter() -> OrderSubmitter:
    """Return the current order submitter. Defaults to HttpOrderSubmitter."""
    global _current_submitter
    if _current_submitter is None:
        _current_submitter = HttpOrderSubmitter()
    return _current_submitter


def set_submitter(submitter: OrderSubmitter) -> None:
    """Override the active order submitter (useful for tests)."""
    global _current_submitter
    _current_submitter = submitter


def reset_submitter() -> None:
    """Reset to default submitter."""
    global _current_submitter
    _current_submitter = None
