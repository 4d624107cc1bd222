"""Shared test fixtures for the envelope test suite."""

from __future__ import annotations

import pytest

from api_envelope.config.settings import EnvelopeSettings, get_settings


# ---------------------------------------------------------------------------
# Settings isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop cached settings and any API_ENVELOPE_ overrides around each test."""
    for key in ("API_ENVELOPE_LOG_LEVEL", "API_ENVELOPE_COMPACT_PROTOCOL"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> EnvelopeSettings:
    return get_settings()
