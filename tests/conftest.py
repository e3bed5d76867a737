"""Shared pytest configuration and fixtures for AI Router tests."""

import pytest

from tests.fixtures.providers import FakeClock, make_provider

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def two_providers():
    """Primary "alpha" (priority 1) and fallback "beta" (priority 2)."""
    return [
        make_provider("alpha", priority=1, cost=0.002),
        make_provider("beta", priority=2, cost=0.001),
    ]


@pytest.fixture
def two_provider_env():
    return {"ALPHA_API_KEY": "alpha-key", "BETA_API_KEY": "beta-key"}


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")


def pytest_collection_modifyitems(config, items):
    """Mark every test under unit/, api/ and cli/ as a unit test; all HTTP is mocked."""
    for item in items:
        path = str(item.fspath)
        if "tests/unit/" in path or "tests/api/" in path or "tests/cli/" in path:
            item.add_marker(pytest.mark.unit)
