"""Automatic page instrumentation.

The embedding application forwards raw page signals to these hooks; they turn
them into tracked events. Hooks are inert until the tracker installs them.

- click: debounced, only the last click in a burst is tracked
- scroll: debounced, reports the scroll position when the burst settles
- submit, visibility change: tracked immediately
- before unload: forced flush
- page timer: ticks every second, emits ``time_on_page`` every 30 seconds
"""


class PageListeners:
    def __init__(self, tracker, scheduler) -> None:
        self.tracker = tracker
        self.scheduler = scheduler
        self.active = False
        self.time_on_page = 0
        self._click_timer = None
        self._scroll_timer = None
        self._page_timer = None

    def install(self) -> None:
        self.active = True
        self._page_timer = self.scheduler.call_every(1.0, self._tick)

    def uninstall(self) -> None:
        self.active = False
        for handle in (self._click_timer, self._scroll_timer, self._page_timer):
            if handle is not None:
                handle.cancel()

    # -------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------
    def click(self, target, x: int = 0, y: int = 0) -> None:
        if not self.active:
            return
        if self._click_timer is not None:
            self._click_timer.cancel()
        self._click_timer = self.scheduler.call_later(
            self.tracker.config.click_debounce,
            lambda: self._track_click(target, x, y),
        )

    def submit(self, form) -> None:
        if not self.active or form is None or form.tag_name != "FORM":
            return
        self.tracker.track(
            "form_submit",
            {
                "form": {
                    "id": form.id,
                    "className": form.class_name,
                    "action": form.action,
                    "method": form.method,
                    "fieldCount": form.field_count,
                }
            },
        )

    def scroll(self) -> None:
        if not self.active:
            return
        if self._scroll_timer is not None:
            self._scroll_timer.cancel()
        self._scroll_timer = self.scheduler.call_later(self.tracker.config.scroll_debounce, self._track_scroll)

    def visibility_change(self) -> None:
        if not self.active:
            return
        page = self.tracker.page
        self.tracker.track(
            "visibility_change",
            {"hidden": page.hidden, "visibilityState": page.visibility_state},
        )

    def before_unload(self) -> None:
        if not self.active:
            return
        self.tracker.unload()

    # -------------------------------------------------------------------
    # Deferred work
    # -------------------------------------------------------------------
    def _track_click(self, target, x, y):
        if target is None or not target.tag_name:
            return
        self.tracker.track(
            "click",
            {
                "element": {
                    "tagName": target.tag_name,
                    "id": target.id,
                    "className": target.class_name,
                    "text": (target.text or "")[:100],
                    "href": target.href,
                    "type": target.type,
                },
                "position": {"x": x, "y": y},
            },
        )

    def _track_scroll(self):
        page = self.tracker.page
        self.tracker.track(
            "scroll",
            {
                "scrollPercent": page.scroll_percent(),
                "scrollY": page.scroll_y,
                "scrollHeight": page.scroll_height,
            },
        )

    def _tick(self):
        self.time_on_page += 1
        if self.time_on_page % self.tracker.config.time_on_page_every == 0:
            self.tracker.track("time_on_page", {"seconds": self.time_on_page})
