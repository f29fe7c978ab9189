import pytest
from tracking.collector.fake_adapter import FakeCollector
from tracking.config import TrackerConfig
from tracking.page import PageEnvironment
from tracking.scheduler import ManualScheduler
from tracking.tracker import Tracker

CHROME_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@pytest.fixture()
def page():
    return PageEnvironment(
        url="https://shop.example.com/products/ropes?flavor=sour#reviews",
        title="Sour Ropes",
        referrer="https://www.google.com/",
        user_agent=CHROME_UA,
        platform="MacIntel",
        screen_width=1920,
        screen_height=1080,
        viewport_width=1280,
        viewport_height=800,
        scroll_height=2800,
    )


@pytest.fixture()
def collector():
    return FakeCollector()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def config():
    return TrackerConfig(api_url="https://collect.example.com/api", website_id="site-001")


@pytest.fixture()
def tracker(page, collector, scheduler):
    return Tracker(page=page, collector=collector, scheduler=scheduler)


@pytest.fixture()
def running_tracker(tracker, config):
    tracker.init(config)
    return tracker
