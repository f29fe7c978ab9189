"""Tracker configuration.

Settings come from three places, later ones winning: defaults, environment
variables (``TRACKDESK_*``), and the embed attributes of the host page
(``data-website-id`` / ``data-id``) for the site identifier.
"""

import os
from dataclasses import dataclass, replace

TRACKDESK_VERSION = "1.0.0"


@dataclass(frozen=True)
class TrackerConfig:
    api_url: str = ""
    website_id: str | None = None
    version: str = TRACKDESK_VERSION
    debug: bool = False
    batch_size: int = 10
    flush_interval: float = 5.0
    timeout: float = 10.0
    click_debounce: float = 0.1
    scroll_debounce: float = 0.5
    time_on_page_every: int = 30

    @classmethod
    def from_env(cls, **overrides) -> "TrackerConfig":
        config = cls(
            api_url=os.environ.get("TRACKDESK_API_URL", "").rstrip("/"),
            website_id=os.environ.get("TRACKDESK_WEBSITE_ID") or None,
            debug=os.environ.get("TRACKDESK_DEBUG", "").lower() in {"1", "true", "yes"},
            batch_size=int(os.environ.get("TRACKDESK_BATCH_SIZE", cls.batch_size)),
            flush_interval=float(os.environ.get("TRACKDESK_FLUSH_INTERVAL", cls.flush_interval)),
            timeout=float(os.environ.get("TRACKDESK_TIMEOUT", cls.timeout)),
        )
        return replace(config, **overrides) if overrides else config

    @classmethod
    def from_embed_attributes(cls, attributes: dict, **overrides) -> "TrackerConfig":
        """Build a config from script-tag style attributes, e.g. ``{"data-website-id": "site-1"}``."""
        website_id = attributes.get("data-website-id") or attributes.get("data-id")
        config = cls(
            api_url=(attributes.get("data-api-url") or "").rstrip("/"),
            website_id=website_id or None,
        )
        return replace(config, **overrides) if overrides else config
