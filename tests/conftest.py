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
    """Select the Protean config overlay before any domain is initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def delivery_settings(monkeypatch):
    """Pin delivery settings to their defaults regardless of the host environment."""
    monkeypatch.setenv("FREE_DELIVERY_THRESHOLD", "1000")
    monkeypatch.setenv("STANDARD_DELIVERY_CHARGE", "50")
    monkeypatch.setenv("ESTIMATED_DELIVERY_MIN_DAYS", "3")
    monkeypatch.setenv("ESTIMATED_DELIVERY_MAX_DAYS", "5")
    monkeypatch.delenv("DEFAULT_PAYMENT_METHOD", raising=False)
