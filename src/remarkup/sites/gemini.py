"""Gemini site adapter.

Gemini renders message blocks as plain ``<p>``/heading/table-cell elements
inside ``.chat-container``. Math it already rendered is a ``.math-inline``
span carrying the TeX source in ``data-math``. While a response streams,
the container holds ``.pending`` or ``.animating`` elements.
"""

from __future__ import annotations

from remarkup.markup.vocabulary import (
    MarkupRole,
    MathSourceRule,
    RenderTemplates,
    TagVocabulary,
    attribute_source,
)
from remarkup.sites.base import MarkupSiteAdapter

GEMINI_VOCABULARY = TagVocabulary(
    tags={
        "i": MarkupRole.ITALIC,
        "em": MarkupRole.ITALIC,
        "b": MarkupRole.BOLD,
        "strong": MarkupRole.BOLD,
        "s": MarkupRole.STRIKE,
        "del": MarkupRole.STRIKE,
        "u": MarkupRole.UNDERLINE,
        "code": MarkupRole.CODE,
        "br": MarkupRole.LINE_BREAK,
    },
    opaque_tags=frozenset(
        {
            "img",
            "button",
            "mat-icon",
            "code-block",
            "source-footnote",
            "sources-carousel-inline",
        }
    ),
    opaque_classes=frozenset({"attachment-container"}),
    math_sources=(
        MathSourceRule(
            extract=attribute_source("data-math"),
            classes=frozenset({"math-inline"}),
        ),
    ),
)

GEMINI_TEMPLATES = RenderTemplates(
    bold='<b class="remarkup-bold">{}</b>',
    italic='<i class="remarkup-italic">{}</i>',
    strike='<s class="remarkup-strike">{}</s>',
    underline='<u class="remarkup-underline">{}</u>',
    code='<code class="remarkup-code">{}</code>',
    math=(
        '<span class="math-inline remarkup-math" data-math="{source}">'
        "{rendered}</span>"
    ),
)


class GeminiAdapter(MarkupSiteAdapter):
    """Adapter for gemini.google.com conversations."""

    def __init__(self) -> None:
        super().__init__(
            name="gemini",
            host_pattern=r"gemini\.google\.com",
            target_selector=".chat-container",
            block_tags=("p", "h1", "h2", "h3", "h4", "td", "th"),
            vocabulary=GEMINI_VOCABULARY,
            templates=GEMINI_TEMPLATES,
        )


# Module-level handler instance for autodiscovery
handler = GeminiAdapter()
