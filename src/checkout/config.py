"""Checkout configuration read from the environment."""

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ApiSettings:
    """Where the storefront backend lives and how to talk to it."""

    base_url: str = "http://localhost:5001/api"
    timeout: float = 30.0
    access_token: str | None = None

    @classmethod
    def from_env(cls) -> "ApiSettings":
        return cls(
            base_url=os.environ.get("STOREFRONT_API_URL", cls.base_url).rstrip("/"),
            timeout=float(os.environ.get("STOREFRONT_API_TIMEOUT", cls.timeout)),
            access_token=os.environ.get("STOREFRONT_API_TOKEN") or None,
        )


@dataclass(frozen=True)
class CartSettings:
    """Switches for the two totals behaviours that still await a product decision.

    Both default to the current storefront behaviour: unselected items count
    towards the subtotal, and a large discount may push the total below zero.
    """

    subtotal_selected_only: bool = False
    floor_total_at_zero: bool = False

    @classmethod
    def from_env(cls) -> "CartSettings":
        return cls(
            subtotal_selected_only=_flag("CART_SUBTOTAL_SELECTED_ONLY"),
            floor_total_at_zero=_flag("CART_FLOOR_TOTAL_AT_ZERO"),
        )
