"""Shared pytest fixtures for remarkup tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from remarkup.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Isolate every test from the developer's environment and .env file."""
    for key in ("APP__SETTINGS_PATH", "APP__MATH_ENGINE", "APP__DEFAULT_SITE"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
