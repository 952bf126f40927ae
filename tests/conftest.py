"""Pytest configuration for vkembed tests."""

import pytest

from vkembed.config.loader import clear_config_cache


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against the real VK API (requires VK_SERVICE_ACCESS_KEY)",
    )


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--run-integration"):
        skip = pytest.mark.skip(reason="needs --run-integration flag")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip)


@pytest.fixture(autouse=True)
def _fresh_config():
    clear_config_cache()
    yield
    clear_config_cache()
