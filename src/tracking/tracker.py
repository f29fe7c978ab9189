"""Trackdesk event batcher.

Events are queued in memory and delivered to the collector in batches: on a
fixed interval, as soon as the queue reaches ``batch_size``, and once more
when the page unloads.

Lifecycle:
    UNINITIALIZED → RUNNING → UNLOADED

Delivery rules:
- A regular flush takes the whole queue and clears it before sending. If the
  send fails the batch goes back to the front of the queue, in order, and is
  retried on the next flush. There is no retry limit and no backoff.
- A forced flush (unload) also takes the whole queue and never puts it back,
  so leaving the page is never held up by a failing collector.

Timer callbacks may run on other threads, so taking the snapshot, clearing
and requeueing happen under one lock. The network call never holds it.
"""

import threading
from dataclasses import replace
from enum import Enum

import structlog

from tracking.collector.http_adapter import HttpCollector
from tracking.collector.port import CollectorError, EventCollector
from tracking.config import TrackerConfig
from tracking.events import AnalyticsEvent, current_timestamp, generate_id
from tracking.listeners import PageListeners
from tracking.page import PageEnvironment
from tracking.scheduler import Scheduler, ThreadingScheduler

logger = structlog.get_logger(__name__)


class TrackerState(Enum):
    UNINITIALIZED = "Uninitialized"
    RUNNING = "Running"
    UNLOADED = "Unloaded"


class Tracker:
    def __init__(
        self,
        page: PageEnvironment | None = None,
        collector: EventCollector | None = None,
        scheduler: Scheduler | None = None,
        embed_attributes: dict | None = None,
    ) -> None:
        self.page = page or PageEnvironment()
        self.config = TrackerConfig()
        self.state = TrackerState.UNINITIALIZED
        self.session_id: str | None = None
        self.user_id: str | None = None
        self.website_id: str | None = None
        self._collector = collector
        self._scheduler = scheduler or ThreadingScheduler()
        self.listeners = PageListeners(self, self._scheduler)
        self._embed_attributes = embed_attributes or {}
        self._queue: list[AnalyticsEvent] = []
        self._lock = threading.RLock()
        self._flush_timer = None

    @property
    def is_initialized(self) -> bool:
        return self.state is TrackerState.RUNNING

    @property
    def queue(self) -> list[AnalyticsEvent]:
        with self._lock:
            return list(self._queue)

    def _log(self, message, **kwargs):
        if self.config.debug:
            logger.info(message, **kwargs)

    # -------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------
    def init(self, config: TrackerConfig | None = None, **overrides) -> None:
        if self.state is not TrackerState.UNINITIALIZED:
            logger.info("Trackdesk already initialized", state=self.state.value)
            return

        config = config or TrackerConfig()
        if overrides:
            config = replace(config, **overrides)

        website_id = (
            config.website_id
            or self._embed_attributes.get("data-website-id")
            or self._embed_attributes.get("data-id")
        )
        if not website_id:
            logger.warning("No website ID found; add data-website-id to the embed or pass website_id")
            return
        if not config.api_url:
            logger.warning("No API URL configured; set api_url in the tracker config")
            return

        self.config = replace(config, website_id=website_id)
        self.website_id = website_id
        self.session_id = generate_id()
        if self._collector is None:
            self._collector = HttpCollector(config.api_url, version=config.version, timeout=config.timeout)
        self.state = TrackerState.RUNNING

        self._log(
            "Trackdesk initialized",
            session_id=self.session_id,
            website_id=website_id,
            api_url=config.api_url,
        )

        self.track(
            "page_view",
            {
                "page": self.page.page_info(),
                "device": self.page.device_info(),
                "browser": self.page.browser_info(),
            },
        )

        self.listeners.install()
        self._flush_timer = self._scheduler.call_every(self.config.flush_interval, self._flush_tick)

    def track(self, event_name: str, data: dict | None = None) -> AnalyticsEvent | None:
        if not self.is_initialized:
            logger.warning("Trackdesk not initialized; call init() first", event_name=event_name)
            return None

        event = AnalyticsEvent(
            event=event_name,
            data=data or {},
            session_id=self.session_id,
            user_id=self.user_id,
            website_id=self.website_id,
            page=self.page.page_info(),
            device=self.page.device_info(),
            browser=self.page.browser_info(),
        )

        with self._lock:
            self._queue.append(event)
            queue_full = len(self._queue) >= self.config.batch_size

        self._log("Event tracked", event_name=event_name, event_id=event.id)

        if queue_full:
            self.flush()
        return event

    def identify(self, user_id: str, user_data: dict | None = None) -> None:
        """Attach ``user_id`` to events tracked from now on (queued events keep theirs)."""
        self.user_id = user_id
        self.track("user_identified", {"userId": user_id, "userData": user_data or {}})

    def convert(self, conversion_data: dict | None = None) -> None:
        self.track("conversion", conversion_data or {})

    def flush(self, force: bool = False) -> bool:
        """Send queued events. Returns True if a batch was delivered."""
        with self._lock:
            if not self._queue:
                return False
            events = list(self._queue)
            # A forced batch is dropped whatever happens, so it leaves the queue now too
            self._queue.clear()

        try:
            self._send(events)
        except CollectorError as exc:
            logger.warning("Failed to flush events", count=len(events), forced=force, error=str(exc))
            if not force:
                with self._lock:
                    # Nothing drains the queue once unloaded
                    if self.state is not TrackerState.UNLOADED:
                        self._queue[0:0] = events
            return False

        self._log("Events flushed successfully", count=len(events))
        return True

    def unload(self) -> None:
        """The page is going away: final forced flush, then stop every timer."""
        if not self.is_initialized:
            return

        self.flush(force=True)
        self.listeners.uninstall()
        if self._flush_timer is not None:
            self._flush_timer.cancel()
        self.state = TrackerState.UNLOADED

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _flush_tick(self):
        with self._lock:
            has_events = bool(self._queue)
        if has_events:
            self.flush()

    def _send(self, events):
        payload = {
            "events": [event.to_dict() for event in events],
            "websiteId": self.website_id,
            "sessionId": self.session_id,
            "timestamp": current_timestamp(),
        }
        return self._collector.send(payload)
