"""HTTP collector: ``POST {api_url}/tracking/events``.

A single ``requests.Session`` is reused so the connection stays alive
between flushes, including the final flush on unload.
"""

import requests

from tracking.collector.port import CollectorError, EventCollector
from tracking.config import TRACKDESK_VERSION


class HttpCollector(EventCollector):
    def __init__(
        self,
        api_url: str,
        version: str = TRACKDESK_VERSION,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = f"{api_url.rstrip('/')}/tracking/events"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "X-Trackdesk-Version": version,
                "Connection": "keep-alive",
            }
        )

    def send(self, payload: dict) -> dict:
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise CollectorError(str(exc)) from exc

        if not response.ok:
            raise CollectorError(f"HTTP {response.status_code}: {response.reason}")

        try:
            return response.json()
        except ValueError as exc:
            raise CollectorError("Collector returned a non-JSON response") from exc
