"""Tag vocabulary: how a site's elements map onto inline markup roles.

Each element the serializer meets is classified into exactly one
``MarkupRole``. Sites differ only in which tags, classes and attributes
carry each role, and in the HTML the renderer emits for it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

__all__ = [
    "MarkupRole",
    "MathSourceRule",
    "RenderTemplates",
    "TagVocabulary",
    "attribute_source",
    "tex_annotation_source",
]


class MarkupRole(Enum):
    """Closed set of roles an element can play in canonical markup."""

    ITALIC = auto()
    BOLD = auto()
    STRIKE = auto()
    UNDERLINE = auto()
    CODE = auto()
    LINE_BREAK = auto()
    MATH_SOURCE = auto()
    OPAQUE = auto()
    TRANSPARENT = auto()


# Returns the TeX source carried by a math element, or None if it has none.
MathSourceExtractor: TypeAlias = Callable[["LexborNode"], str | None]


def attribute_source(attr: str) -> MathSourceExtractor:
    """Math source read verbatim from an attribute (e.g. ``data-math``)."""

    def _extract(node: LexborNode) -> str | None:
        return node.attributes.get(attr) or None

    return _extract


def tex_annotation_source(node: LexborNode) -> str | None:
    """Math source read from a KaTeX MathML ``<annotation>`` element."""
    annotation = node.css_first('annotation[encoding="application/x-tex"]')
    if annotation is None:
        return None
    return annotation.text(deep=True)


@dataclass(frozen=True)
class MathSourceRule:
    """Identifies elements holding pre-rendered math.

    ``empty`` is what the element serializes to when it matches but has no
    source: ``None`` means "fall through to its children".
    """

    extract: MathSourceExtractor
    tags: frozenset[str] = frozenset()
    classes: frozenset[str] = frozenset()
    attributes: frozenset[str] = frozenset()
    empty: str | None = None

    def matches(self, tag: str, classes: set[str], attrs: dict) -> bool:
        return (
            tag in self.tags
            or not self.classes.isdisjoint(classes)
            or any(a in attrs for a in self.attributes)
        )


def _classes_of(node: LexborNode) -> set[str]:
    return set((node.attributes.get("class") or "").split())


@dataclass(frozen=True)
class TagVocabulary:
    """Per-site mapping from tag names and classes to ``MarkupRole``."""

    tags: dict[str, MarkupRole]
    classes: dict[str, MarkupRole] = field(default_factory=dict)
    opaque_tags: frozenset[str] = frozenset()
    opaque_classes: frozenset[str] = frozenset()
    math_sources: tuple[MathSourceRule, ...] = ()

    def classify(self, node: LexborNode) -> tuple[MarkupRole, MathSourceRule | None]:
        """Return the role of *node*, and the math rule if it is math."""
        tag = (node.tag or "").lower()
        classes = _classes_of(node)

        if tag in self.opaque_tags or not self.opaque_classes.isdisjoint(classes):
            return MarkupRole.OPAQUE, None

        attrs = node.attributes
        for rule in self.math_sources:
            if rule.matches(tag, classes, attrs):
                return MarkupRole.MATH_SOURCE, rule

        if tag in self.tags:
            return self.tags[tag], None

        for cls in sorted(classes):
            if cls in self.classes:
                return self.classes[cls], None

        return MarkupRole.TRANSPARENT, None


@dataclass(frozen=True)
class RenderTemplates:
    """HTML the renderer emits for each role; ``{}`` is the content slot.

    ``math`` takes two named slots: ``{source}`` (attribute-escaped TeX)
    and ``{rendered}`` (the typeset markup).
    """

    bold: str = "<b>{}</b>"
    italic: str = "<i>{}</i>"
    strike: str = "<s>{}</s>"
    underline: str = "<u>{}</u>"
    code: str = "<code>{}</code>"
    math: str = '<span class="math-inline" data-math="{source}">{rendered}</span>'
    line_break: str = "<br>"
