"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and a transport test
double. Environment fixtures are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os

import pytest

from storyfeed.config import Config
from tests.helpers import INDEX_URL, ITEM_URL_TEMPLATE, FakeTransport

# =============================================================================
# Test Doubles
# =============================================================================


@pytest.fixture
def transport() -> FakeTransport:
    """Fresh transport double (not autouse)."""
    return FakeTransport()


@pytest.fixture
def config() -> Config:
    """Config pointed at the fake endpoints (not autouse)."""
    return Config(index_url=INDEX_URL, item_url_template=ITEM_URL_TEMPLATE)


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_storyfeed_env(request, monkeypatch):
    """Clear STORYFEED_* variables so the outer shell cannot leak into tests.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("STORYFEED_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
