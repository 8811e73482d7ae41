"""
Shared fixtures for wavespeed tests.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from wavespeed import WaveSpeed

ENV_VARS = (
    "WAVESPEED_API_KEY",
    "WAVESPEED_BASE_URL",
    "WAVESPEED_POLL_INTERVAL",
    "WAVESPEED_TIMEOUT",
    "WAVESPEED_MAX_RETRIES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_client(monkeypatch) -> Callable[..., WaveSpeed]:
    """Build a client over ``httpx.MockTransport`` with backoff delays disabled."""

    def _make(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> WaveSpeed:
        kwargs.setdefault("api_key", "test-api-key")
        kwargs.setdefault("poll_interval", 0.01)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = WaveSpeed(http_client=http_client, **kwargs)
        monkeypatch.setattr(client, "_backoff_time", lambda attempt: 0.0)
        return client

    return _make
