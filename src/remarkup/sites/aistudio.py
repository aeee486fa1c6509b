"""AI Studio site adapter.

AI Studio wraps markdown output in ``<ms-cmark-node>`` custom elements,
marks inline code with the ``inline-code`` class, and renders math as
``<ms-katex>`` whose KaTeX MathML keeps the TeX source in an
``annotation[encoding="application/x-tex"]`` element.
"""

from __future__ import annotations

from remarkup.markup.vocabulary import (
    MarkupRole,
    MathSourceRule,
    RenderTemplates,
    TagVocabulary,
    attribute_source,
    tex_annotation_source,
)
from remarkup.sites.base import MarkupSiteAdapter

AISTUDIO_VOCABULARY = TagVocabulary(
    tags={
        "em": MarkupRole.ITALIC,
        "strong": MarkupRole.BOLD,
        "s": MarkupRole.STRIKE,
        "del": MarkupRole.STRIKE,
        "u": MarkupRole.UNDERLINE,
        "br": MarkupRole.LINE_BREAK,
        "ms-cmark-node": MarkupRole.TRANSPARENT,
    },
    classes={
        "inline-code": MarkupRole.CODE,
        "remarkup-italic": MarkupRole.ITALIC,
    },
    opaque_tags=frozenset({"img", "ms-image-chunk", "ms-file-chunk", "ms-code-block"}),
    math_sources=(
        # An ms-katex without a TeX annotation serializes to nothing.
        MathSourceRule(
            extract=tex_annotation_source,
            tags=frozenset({"ms-katex"}),
            empty="",
        ),
        MathSourceRule(
            extract=attribute_source("data-math"),
            classes=frozenset({"remarkup-math"}),
        ),
    ),
)

AISTUDIO_TEMPLATES = RenderTemplates(
    bold="<strong>{}</strong>",
    italic='<span class="remarkup-italic" style="font-style:italic">{}</span>',
    strike="<s>{}</s>",
    underline="<u>{}</u>",
    code='<span class="inline-code">{}</span>',
    math='<span class="remarkup-math" data-math="{source}">{rendered}</span>',
)


class AIStudioAdapter(MarkupSiteAdapter):
    """Adapter for aistudio.google.com chat sessions."""

    def __init__(self) -> None:
        super().__init__(
            name="aistudio",
            host_pattern=r"aistudio\.google\.com",
            target_selector=".chat-session-content",
            block_tags=("p", "h1", "h2", "h3", "h4"),
            vocabulary=AISTUDIO_VOCABULARY,
            templates=AISTUDIO_TEMPLATES,
            streaming_selector=".pending, .animating, ms-thinking-indicator",
        )


# Module-level handler instance for autodiscovery
handler = AIStudioAdapter()
