"""The host page as the tracker sees it.

``PageEnvironment`` is mutable: the embedding application keeps it current
(navigation, viewport resize, scrolling, visibility) and the tracker takes a
fresh snapshot every time it records an event.
"""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass
class Element:
    """The clicked element, reduced to what the click event reports."""

    tag_name: str
    id: str = ""
    class_name: str = ""
    text: str = ""
    href: str | None = None
    type: str | None = None


@dataclass
class Form:
    id: str = ""
    class_name: str = ""
    action: str = ""
    method: str = "get"
    field_count: int = 0
    tag_name: str = "FORM"


@dataclass
class PageEnvironment:
    url: str = ""
    title: str = ""
    referrer: str = ""
    user_agent: str = ""
    language: str = "en-US"
    platform: str = ""
    screen_width: int = 0
    screen_height: int = 0
    viewport_width: int = 0
    viewport_height: int = 0
    color_depth: int = 24
    timezone: str = "UTC"
    scroll_y: float = 0.0
    scroll_height: float = 0.0
    hidden: bool = False

    @property
    def visibility_state(self) -> str:
        return "hidden" if self.hidden else "visible"

    def navigate(self, url: str, title: str = "", referrer: str | None = None) -> None:
        self.referrer = self.url if referrer is None else referrer
        self.url = url
        self.title = title
        self.scroll_y = 0.0

    def page_info(self) -> dict:
        parts = urlsplit(self.url)
        return {
            "url": self.url,
            "title": self.title,
            "referrer": self.referrer,
            "path": parts.path,
            "search": f"?{parts.query}" if parts.query else "",
            "hash": f"#{parts.fragment}" if parts.fragment else "",
        }

    def device_info(self) -> dict:
        return {
            "userAgent": self.user_agent,
            "language": self.language,
            "platform": self.platform,
            "screenWidth": self.screen_width,
            "screenHeight": self.screen_height,
            "viewportWidth": self.viewport_width,
            "viewportHeight": self.viewport_height,
            "colorDepth": self.color_depth,
            "timezone": self.timezone,
        }

    def browser_info(self) -> dict:
        return parse_browser(self.user_agent)

    def scroll_percent(self) -> int:
        scrollable = self.scroll_height - self.viewport_height
        if scrollable <= 0:
            return 0
        # Half-up rounding, not banker's rounding
        return int(self.scroll_y * 100 / scrollable + 0.5)


_BROWSER_RULES = (
    ("Chrome", lambda ua: "Chrome" in ua and "Edg" not in ua, r"Chrome/(\d+)"),
    ("Firefox", lambda ua: "Firefox" in ua, r"Firefox/(\d+)"),
    ("Safari", lambda ua: "Safari" in ua and "Chrome" not in ua, r"Version/(\d+)"),
    ("Edge", lambda ua: "Edg" in ua, r"Edg/(\d+)"),
)


def parse_browser(user_agent: str) -> dict:
    """Name and major version of the browser behind a user agent string."""
    for name, matches, version_pattern in _BROWSER_RULES:
        if matches(user_agent):
            found = re.search(version_pattern, user_agent)
            return {"browser": name, "version": found.group(1) if found else "Unknown"}
    return {"browser": "Unknown", "version": "Unknown"}
