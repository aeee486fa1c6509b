"""Shared implementation for site adapters.

A concrete site only declares its selectors, tag vocabulary and output
templates; serialization, rendering and the change filter are common.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from remarkup.markup.gating import needs_processing
from remarkup.markup.math import Latex2MathMLEngine
from remarkup.markup.renderer import render
from remarkup.markup.serializer import serialize_children

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

    from remarkup.markup.math import MathEngine
    from remarkup.markup.placeholders import ProtectedFragments
    from remarkup.markup.vocabulary import RenderTemplates, TagVocabulary
    from remarkup.settings_store import FeatureSettings

__all__ = ["PROCESSED_ATTR", "MarkupSiteAdapter", "unprocessed_selector"]

# Set on a block element once its content is known-correct.
PROCESSED_ATTR = "data-rerendered"


def unprocessed_selector(block_tags: frozenset[str] | tuple[str, ...]) -> str:
    """CSS selector for block elements not yet marked processed."""
    return ", ".join(f'{tag}:not([{PROCESSED_ATTR}="true"])' for tag in block_tags)


class MarkupSiteAdapter:
    """Site adapter built from a vocabulary and output templates.

    Serializing and rendering one element share a ``ProtectedFragments``
    store owned by the caller: element placeholders issued by ``serialize``
    are restored by the ``render`` given the same store. The adapter itself
    holds no per-element state.
    """

    def __init__(
        self,
        name: str,
        host_pattern: str,
        target_selector: str,
        block_tags: tuple[str, ...],
        vocabulary: TagVocabulary,
        templates: RenderTemplates,
        streaming_selector: str = ".pending, .animating",
        math_engine: MathEngine | None = None,
    ) -> None:
        self.name = name
        self.host_pattern = re.compile(host_pattern)
        self.target_selector = target_selector
        self._block_tag_order = tuple(block_tags)
        self.block_tags = frozenset(block_tags)
        self.element_selector = unprocessed_selector(block_tags)
        self.streaming_selector = streaming_selector
        self.vocabulary = vocabulary
        self.templates = templates
        self.math_engine: MathEngine | None = (
            math_engine if math_engine is not None else Latex2MathMLEngine()
        )

    def matches(self, url: str) -> bool:
        host = urlsplit(url).hostname if "//" in url else url
        return bool(self.host_pattern.search(host or ""))

    def serialize(
        self,
        node: LexborNode,
        settings: FeatureSettings,  # noqa: ARG002
        fragments: ProtectedFragments,
    ) -> str:
        return serialize_children(node, self.vocabulary, fragments)

    def render(
        self, text: str, settings: FeatureSettings, fragments: ProtectedFragments
    ) -> str:
        return render(text, settings, self.templates, fragments, self.math_engine)

    def needs_processing(self, text: str, settings: FeatureSettings) -> bool:
        return needs_processing(text, settings)

    def with_math_engine(self, engine: MathEngine | None) -> MarkupSiteAdapter:
        """Return a copy of this adapter using *engine* (``None`` disables math)."""
        clone = MarkupSiteAdapter(
            name=self.name,
            host_pattern=self.host_pattern.pattern,
            target_selector=self.target_selector,
            block_tags=self._block_tag_order,
            vocabulary=self.vocabulary,
            templates=self.templates,
            streaming_selector=self.streaming_selector,
        )
        clone.math_engine = engine
        return clone

    @property
    def style_selectors(self) -> dict[str, str]:
        """CSS selector for each style category's rendered output."""
        return {
            "bold": _selector_for(self.templates.bold),
            "italic": _selector_for(self.templates.italic),
            "strike": _selector_for(self.templates.strike),
            "underline": _selector_for(self.templates.underline),
            "code": _selector_for(self.templates.code),
            "latex": _selector_for(self.templates.math),
        }


_OPEN_TAG = re.compile(r"<([a-zA-Z][\w-]*)([^>]*)>")
_CLASS_ATTR = re.compile(r'class="([^"]*)"')
_STYLE_ATTR = re.compile(r'style="([^"]*)"')


def _selector_for(template: str) -> str:
    """Derive a CSS selector from the first tag of an output template."""
    m = _OPEN_TAG.match(template)
    if m is None:
        return ""
    tag, attrs = m.group(1), m.group(2)
    selector = tag
    if (cls := _CLASS_ATTR.search(attrs)) is not None:
        selector += "".join(f".{c}" for c in cls.group(1).split())
    elif (style := _STYLE_ATTR.search(attrs)) is not None:
        selector += f'[style="{style.group(1)}"]'
    return selector
