"""In-memory collector that records batches for test assertions."""

from tracking.collector.port import CollectorError, EventCollector


class FakeCollector(EventCollector):
    def __init__(self) -> None:
        self.batches: list[dict] = []
        self.failed_attempts: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "HTTP 503: Service Unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "HTTP 503: Service Unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    @property
    def calls(self) -> int:
        return len(self.batches) + len(self.failed_attempts)

    def sent_events(self) -> list[dict]:
        return [event for batch in self.batches for event in batch["events"]]

    def send(self, payload: dict) -> dict:
        if not self.should_succeed:
            self.failed_attempts.append(payload)
            raise CollectorError(self.failure_reason)

        self.batches.append(payload)
        return {"success": True, "received": len(payload["events"])}

    def reset(self):
        self.batches.clear()
        self.failed_attempts.clear()
        self.should_succeed = True
