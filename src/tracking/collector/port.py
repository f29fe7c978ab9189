"""Event collector port (abstract interface)."""

from abc import ABC, abstractmethod


class CollectorError(Exception):
    """A batch did not reach the collector."""


class EventCollector(ABC):
    @abstractmethod
    def send(self, payload: dict) -> dict:
        """Deliver one batch payload. Raises ``CollectorError`` on failure."""
        ...
