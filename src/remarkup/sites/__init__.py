"""Per-site adapters for chat pages whose inline markup needs fixing.

This module provides a Protocol + Registry pattern: each supported host
page (Gemini, AI Studio) contributes an adapter with its selectors and tag
vocabulary, while the re-render algorithm stays the same.

Usage:
    from remarkup.sites import get_adapter

    adapter = get_adapter("https://gemini.google.com/app/123")
    # Or with an explicit site name:
    adapter = get_adapter_by_name("aistudio")
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
import re
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

    from remarkup.markup.placeholders import ProtectedFragments
    from remarkup.settings_store import FeatureSettings

__all__ = ["SiteAdapter", "get_adapter", "get_adapter_by_name", "registered_sites"]

logger = logging.getLogger(__name__)

# Registry of site adapters, populated by autodiscovery
_adapters: dict[str, SiteAdapter] = {}


@runtime_checkable
class SiteAdapter(Protocol):
    """Protocol for a host page the re-renderer can work on.

    Each adapter must provide:
    - name: Identifier for the site (e.g., "gemini")
    - host_pattern: Regex matched against the page URL's host
    - target_selector: The conversation container
    - element_selector: Unprocessed block elements inside the container
    - streaming_selector: Indicator that a response is still streaming
    - block_tags: Tag names whose child-list changes trigger a pass
    - serialize/render/needs_processing: the markup pipeline for the site;
      one ProtectedFragments store is shared by serialize and render of the
      same element
    """

    name: str
    host_pattern: re.Pattern[str]
    target_selector: str
    element_selector: str
    streaming_selector: str
    block_tags: frozenset[str]

    def matches(self, url: str) -> bool:
        """Return True if this adapter handles pages at *url*."""
        ...

    def serialize(
        self,
        node: LexborNode,
        settings: FeatureSettings,
        fragments: ProtectedFragments,
    ) -> str:
        """Return canonical markup text for a block element's content.

        Opaque subtrees are stored in *fragments* and left as placeholders.
        """
        ...

    def render(
        self, text: str, settings: FeatureSettings, fragments: ProtectedFragments
    ) -> str:
        """Return corrected HTML for *text*, restoring from *fragments*."""
        ...

    def needs_processing(self, text: str, settings: FeatureSettings) -> bool:
        """Return True if *text* contains markup worth re-rendering."""
        ...


def _register(adapter: object, origin: str) -> bool:
    """Add *adapter* to the registry; returns False if it was rejected.

    The first module to claim a site name keeps it. Registering the same
    adapter object again is a no-op.
    """
    if not isinstance(adapter, SiteAdapter):
        logger.warning("%s.handler is not a SiteAdapter; ignored", origin)
        return False
    existing = _adapters.get(adapter.name)
    if existing is not None and existing is not adapter:
        logger.error(
            "Site name '%s' from %s is already registered; ignored",
            adapter.name,
            origin,
        )
        return False
    _adapters[adapter.name] = adapter
    logger.debug("Registered site adapter: %s", adapter.name)
    return True


def _discover_adapters() -> None:
    """Import every site module in this package and register its ``handler``.

    A module that fails to import is logged and left out of the registry.
    """
    for info in pkgutil.iter_modules(__path__, f"{__name__}."):
        if info.name.endswith(".base"):
            continue
        try:
            module = importlib.import_module(info.name)
        except Exception:
            logger.exception("Failed to import site adapter module: %s", info.name)
            continue
        adapter = getattr(module, "handler", None)
        if adapter is not None:
            _register(adapter, info.name)


def registered_sites() -> list[str]:
    """Names of all registered adapters, sorted."""
    return sorted(_adapters)


def get_adapter(url: str) -> SiteAdapter | None:
    """Find the adapter for the page at *url*.

    Args:
        url: Page URL or bare host name.

    Returns:
        The matching SiteAdapter, or None if the site is unsupported.
    """
    for adapter in _adapters.values():
        if adapter.matches(url):
            logger.info("Detected site: %s", adapter.name)
            return adapter
    logger.warning("Unsupported site: %s", url)
    return None


def get_adapter_by_name(name: str) -> SiteAdapter | None:
    """Look up an adapter by its registered name."""
    adapter = _adapters.get(name)
    if adapter is None:
        logger.warning("Unknown site '%s'", name)
    return adapter


# Run autodiscovery on module import
_discover_adapters()
