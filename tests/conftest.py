"""Shared test fixtures for puzzmo2signal."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from puzzmo2signal.config import Settings

# token_hex(32) produces 64 hex characters
MOCK_WEBHOOK_PATH = "ab" * 32

TEST_ENV = {
    "TS_HOSTNAME": "puzzmo-webhook",
    "TS_AUTHKEY": "tskey-auth-test",
    "SIGNAL_PHONE": "+15550001111",
    "SIGNAL_GROUP_ID": "group.dGVzdA==",
    "SIGNAL_API_URL": "signal-api:8080",
}


def make_settings(**kwargs: Any) -> Settings:
    """Factory for Settings with sensible defaults."""
    defaults: dict[str, Any] = {
        "ts_hostname": TEST_ENV["TS_HOSTNAME"],
        "ts_authkey": TEST_ENV["TS_AUTHKEY"],
        "signal_phone": TEST_ENV["SIGNAL_PHONE"],
        "signal_group_id": TEST_ENV["SIGNAL_GROUP_ID"],
        "signal_api_url": TEST_ENV["SIGNAL_API_URL"],
    }
    defaults.update(kwargs)
    return Settings(**defaults)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def signal_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Populate the required environment variables."""
    for name, value in TEST_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("TS_CERT_DOMAIN", raising=False)
    monkeypatch.delenv("PRESERVE_MARKDOWN", raising=False)
    return dict(TEST_ENV)


@pytest.fixture
def signal_api() -> Iterator[AsyncMock]:
    """Patch the sender's httpx client; yields the mock client.

    ``post`` answers 200 by default; tests override ``return_value`` or
    ``side_effect``.
    """
    with patch("puzzmo2signal.signal_api.sender.httpx.AsyncClient") as mock_cls:
        mock_client = AsyncMock()
        mock_client.post.return_value = MagicMock(status_code=200, text="")
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        mock_cls.return_value = mock_client
        yield mock_client
