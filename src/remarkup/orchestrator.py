"""Idempotent re-render of a chat page's message blocks.

Each candidate block element moves from *unprocessed* to *processed*:
serialize -> filter -> (render -> compare -> write) -> mark. Marking happens
whether or not anything was written, so a block that needs no change is not
rescanned on the next notification. A settings update removes every marker
and runs one more pass.

The whole pass is skipped, with no element transitions, while the feature is
disabled, when the site's container is missing, or while a response is still
streaming into the container.

Notifications arrive over an ``asyncio.Queue`` and are handled one at a time;
a pass runs synchronously to completion before the next message is read.
Because written elements are marked before the pass returns, the mutations a
pass causes itself find nothing left to do.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, TypeAlias

from selectolax.lexbor import LexborHTMLParser

from remarkup.markup.placeholders import ProtectedFragments
from remarkup.sites.base import PROCESSED_ATTR

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

    from remarkup.settings_store import SettingsStore, UserSettings
    from remarkup.sites import SiteAdapter

__all__ = [
    "HtmlPolicy",
    "HtmlPolicyError",
    "Notification",
    "PassthroughPolicy",
    "ReRenderer",
    "RenderStats",
    "SettingsUpdated",
    "SubtreeChanged",
    "as_serialized",
    "follow_settings",
]

logger = logging.getLogger(__name__)


class HtmlPolicyError(RuntimeError):
    """The HTML insertion policy rejected a write."""


class HtmlPolicy(Protocol):
    """Hook every HTML write goes through before reaching the document."""

    def create_html(self, html: str) -> str: ...


class PassthroughPolicy:
    """Default policy: HTML is written unchanged."""

    def create_html(self, html: str) -> str:
        return html


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SubtreeChanged:
    """The host page's content changed.

    The producer applies the change to the document before sending this.
    ``target_tag`` is the element whose children changed, if known.
    """

    added_nodes: int = 0
    target_tag: str | None = None


@dataclass(frozen=True)
class SettingsUpdated:
    """Full replacement settings object from the settings store."""

    settings: UserSettings


Notification: TypeAlias = SubtreeChanged | SettingsUpdated


def follow_settings(
    store: SettingsStore, channel: asyncio.Queue[Notification | None]
) -> Callable[[], None]:
    """Forward every settings object *store* saves into *channel*.

    Returns the function that stops forwarding.
    """
    return store.subscribe(
        lambda settings: channel.put_nowait(SettingsUpdated(settings=settings))
    )


# Inner HTML parses differently depending on the enclosing element.
_FRAGMENT_CONTEXT = {
    "td": "<table><tr><td></td></tr></table>",
    "th": "<table><tr><th></th></tr></table>",
}


def as_serialized(tag: str, html: str) -> str:
    """Return *html* as the document serializes it inside a *tag* element.

    Rendered HTML and ``inner_html`` differ in entity spelling: a
    non-breaking space comes back as ``&nbsp;`` and attribute escapes are
    normalized. The two are only comparable after a round trip through the
    parser.
    """
    shell = _FRAGMENT_CONTEXT.get(tag, f"<{tag}></{tag}>")
    node = LexborHTMLParser(shell).css_first(tag)
    if node is None:
        return html
    node.inner_html = html
    return node.inner_html or ""


@dataclass
class RenderStats:
    """Outcome of one re-render pass."""

    processed: int = 0
    written: int = 0
    skipped: str | None = None
    written_tags: list[str] = field(default_factory=list)


class ReRenderer:
    """Runs re-render passes over one document for one site."""

    def __init__(
        self,
        document: LexborHTMLParser,
        adapter: SiteAdapter,
        settings: UserSettings,
        policy: HtmlPolicy | None = None,
    ) -> None:
        self.document = document
        self.adapter = adapter
        self.settings = settings
        self.policy: HtmlPolicy = policy or PassthroughPolicy()

    # -- single pass ------------------------------------------------------
    def _skip_reason(self) -> tuple[str | None, LexborNode | None]:
        if not self.settings.features.enabled:
            return "disabled", None
        container = self.document.css_first(self.adapter.target_selector)
        if container is None:
            return "no container", None
        if container.css_first(self.adapter.streaming_selector) is not None:
            return "streaming", None
        return None, container

    def rerender(self) -> RenderStats:
        """Process every unmarked candidate element once.

        Candidates are re-queried after each element: rewriting one block
        replaces any blocks nested inside it, so node handles collected up
        front could refer to removed nodes.

        Raises:
            HtmlPolicyError: If the HTML policy rejects a write. Elements
                already processed in this pass keep their markers; the
                rejected element stays unmarked.
        """
        reason, container = self._skip_reason()
        if container is None:
            logger.debug("Re-render skipped: %s", reason)
            return RenderStats(skipped=reason)

        stats = RenderStats()
        features = self.settings.features
        selector = self.adapter.element_selector
        while (element := container.css_first(selector)) is not None:
            fragments = ProtectedFragments()
            text = self.adapter.serialize(element, features, fragments)
            if self.adapter.needs_processing(text, features):
                new_html = self.adapter.render(text, features, fragments)
                if element.inner_html != as_serialized(element.tag, new_html):
                    element.inner_html = self.policy.create_html(new_html)
                    stats.written += 1
                    stats.written_tags.append(element.tag or "")
            element.attrs[PROCESSED_ATTR] = "true"
            stats.processed += 1

        if stats.written:
            logger.debug(
                "Re-render pass: %d processed, %d rewritten",
                stats.processed,
                stats.written,
            )
        return stats

    # -- settings ---------------------------------------------------------
    def clear_markers(self) -> int:
        """Remove every processed marker in the document."""
        cleared = 0
        for node in self.document.css(f"[{PROCESSED_ATTR}]"):
            del node.attrs[PROCESSED_ATTR]
            cleared += 1
        return cleared

    def apply_settings(self, settings: UserSettings) -> RenderStats:
        """Adopt *settings*, invalidate every marker and run one pass."""
        self.settings = settings
        cleared = self.clear_markers()
        logger.info("Settings updated, %d elements invalidated", cleared)
        return self.rerender()

    # -- notifications ----------------------------------------------------
    def is_relevant(self, change: SubtreeChanged) -> bool:
        """Whether a mutation could have produced new unprocessed content."""
        if change.added_nodes > 0:
            return True
        return (change.target_tag or "").lower() in self.adapter.block_tags

    def handle(self, notification: Notification) -> RenderStats | None:
        """Apply one notification; returns the pass stats if a pass ran."""
        match notification:
            case SettingsUpdated(settings=settings):
                return self.apply_settings(settings)
            case SubtreeChanged():
                if not self.is_relevant(notification):
                    return None
                return self.rerender()
        msg = f"unknown notification {notification!r}"
        raise TypeError(msg)

    async def run(self, channel: asyncio.Queue[Notification | None]) -> None:
        """Consume notifications until a ``None`` sentinel arrives.

        Runs one eager pass first. A pass aborted by the HTML policy is
        logged and not retried until the next notification.
        """
        logger.info("Re-renderer started for %s", self.adapter.name)
        self._guarded(self.rerender)
        while True:
            notification = await channel.get()
            try:
                if notification is None:
                    break
                self._guarded(lambda n=notification: self.handle(n))
            finally:
                channel.task_done()
        logger.info("Re-renderer stopped for %s", self.adapter.name)

    def _guarded(self, step: Callable[[], RenderStats | None]) -> None:
        try:
            step()
        except HtmlPolicyError:
            logger.exception("HTML policy rejected a write; pass aborted")
