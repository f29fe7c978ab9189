"""Analytics event records and identifiers."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4


def generate_id() -> str:
    return uuid4().hex[:16]


def current_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class AnalyticsEvent:
    """One tracked interaction, with the page as it looked when it happened."""

    event: str
    session_id: str
    website_id: str
    data: dict = field(default_factory=dict)
    user_id: str | None = None
    page: dict = field(default_factory=dict)
    device: dict = field(default_factory=dict)
    browser: dict = field(default_factory=dict)
    id: str = field(default_factory=generate_id)
    timestamp: str = field(default_factory=current_timestamp)

    def to_dict(self) -> dict:
        """Wire format expected by the collector."""
        return {
            "id": self.id,
            "event": self.event,
            "data": self.data,
            "timestamp": self.timestamp,
            "sessionId": self.session_id,
            "userId": self.user_id,
            "websiteId": self.website_id,
            "page": self.page,
            "device": self.device,
            "browser": self.browser,
        }
