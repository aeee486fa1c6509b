"""Unit tests for site adapter registry and autodiscovery."""

from __future__ import annotations

import pytest


class TestDiscoverAdapters:
    """Tests for adapter autodiscovery."""

    def test_discovers_gemini_adapter(self) -> None:
        """Autodiscovery finds the Gemini adapter."""
        from remarkup.sites import _adapters

        assert "gemini" in _adapters

    def test_discovers_aistudio_adapter(self) -> None:
        """Autodiscovery finds the AI Studio adapter."""
        from remarkup.sites import _adapters

        assert "aistudio" in _adapters

    def test_registered_sites_sorted(self) -> None:
        """registered_sites lists exactly the discovered adapters."""
        from remarkup.sites import registered_sites

        assert registered_sites() == ["aistudio", "gemini"]

    def test_adapters_implement_protocol(self) -> None:
        """Every registered adapter satisfies SiteAdapter."""
        from remarkup.sites import SiteAdapter, _adapters

        for adapter in _adapters.values():
            assert isinstance(adapter, SiteAdapter)


class TestGetAdapter:
    """Tests for get_adapter dispatch."""

    def test_gemini_url(self) -> None:
        """A Gemini conversation URL selects the Gemini adapter."""
        from remarkup.sites import get_adapter

        adapter = get_adapter("https://gemini.google.com/app/abc123")
        assert adapter is not None
        assert adapter.name == "gemini"

    def test_aistudio_bare_host(self) -> None:
        """A bare host name is accepted."""
        from remarkup.sites import get_adapter

        adapter = get_adapter("aistudio.google.com")
        assert adapter is not None
        assert adapter.name == "aistudio"

    def test_unsupported_site_returns_none(self) -> None:
        """Unknown hosts have no adapter."""
        from remarkup.sites import get_adapter

        assert get_adapter("https://example.com/chat") is None

    def test_path_does_not_count_as_host(self) -> None:
        """Only the host part of a URL is matched."""
        from remarkup.sites import get_adapter

        assert get_adapter("https://example.com/gemini.google.com") is None

    def test_by_name(self) -> None:
        from remarkup.sites import get_adapter_by_name

        adapter = get_adapter_by_name("gemini")
        assert adapter is not None
        assert adapter.target_selector == ".chat-container"

    def test_unknown_name(self) -> None:
        from remarkup.sites import get_adapter_by_name

        assert get_adapter_by_name("chatgpt") is None


class TestRegister:
    """Tests for registering a discovered handler."""

    @pytest.fixture(autouse=True)
    def _isolated_registry(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import remarkup.sites as sites

        monkeypatch.setattr(sites, "_adapters", dict(sites._adapters))

    def test_duplicate_site_name_rejected(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A second adapter claiming an existing name does not replace it."""
        import remarkup.sites as sites
        from remarkup.sites.gemini import GeminiAdapter

        original = sites._adapters["gemini"]
        assert sites._register(GeminiAdapter(), "remarkup.sites.gemini_copy") is False
        assert sites._adapters["gemini"] is original
        assert "already registered" in caplog.text

    def test_same_adapter_again_is_accepted(self) -> None:
        import remarkup.sites as sites

        original = sites._adapters["gemini"]
        assert sites._register(original, "remarkup.sites.gemini") is True
        assert sites._adapters["gemini"] is original

    def test_non_adapter_handler_ignored(self) -> None:
        """A module-level handler that is not a SiteAdapter is skipped."""
        import remarkup.sites as sites

        before = dict(sites._adapters)
        assert sites._register(object(), "remarkup.sites.broken") is False
        assert sites._adapters == before
