import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pins the Protean config overlay and keeps ambient environment switches from
    leaking into the cart totals under test.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    for name in ("CART_SUBTOTAL_SELECTED_ONLY", "CART_FLOOR_TOTAL_AT_ZERO", "TRACKDESK_API_URL", "TRACKDESK_WEBSITE_ID"):
        os.environ.pop(name, None)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
