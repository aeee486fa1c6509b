"""Flatten a rendered content subtree back into canonical markup text.

Canonical markup is a small inline grammar::

    *x*  **x**  ~~x~~  <u>x</u>  `x`  $x$  and "\\n" for line breaks

Text nodes contribute their literal text; this is the only source of
characters the renderer later HTML-escapes. Opaque elements are not
descended into: their outer HTML is protected behind an element
placeholder so it survives the round trip byte-for-byte.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from remarkup.markup.placeholders import PlaceholderKind, ProtectedFragments
from remarkup.markup.vocabulary import MarkupRole

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

    from remarkup.markup.vocabulary import TagVocabulary

__all__ = ["serialize", "serialize_children"]

_TEXT_TAG = "-text"

_WRAPPERS: dict[MarkupRole, tuple[str, str]] = {
    MarkupRole.ITALIC: ("*", "*"),
    MarkupRole.BOLD: ("**", "**"),
    MarkupRole.STRIKE: ("~~", "~~"),
    MarkupRole.UNDERLINE: ("<u>", "</u>"),
    MarkupRole.CODE: ("`", "`"),
}


def serialize_children(
    node: LexborNode,
    vocabulary: TagVocabulary,
    fragments: ProtectedFragments,
) -> str:
    """Serialize the content of *node* without wrapping *node* itself."""
    parts: list[str] = []
    child = node.child
    while child is not None:
        parts.append(serialize(child, vocabulary, fragments))
        child = child.next
    return "".join(parts)


def serialize(
    node: LexborNode,
    vocabulary: TagVocabulary,
    fragments: ProtectedFragments,
) -> str:
    """Serialize *node* (text or element) to canonical markup text.

    Args:
        node: Node from the host document.
        vocabulary: Site tag vocabulary used to classify elements.
        fragments: Per-element fragment store; opaque subtrees are
            protected here as element placeholders.

    Returns:
        Canonical markup text for *node*.
    """
    tag = node.tag
    if tag == _TEXT_TAG:
        return node.text_content or ""
    if not tag or tag.startswith(("-", "!", "_")):
        # comments, doctype and other non-element nodes
        return ""

    role, math_rule = vocabulary.classify(node)

    match role:
        case MarkupRole.OPAQUE:
            return fragments.protect(PlaceholderKind.ELEMENT, node.html or "")
        case MarkupRole.LINE_BREAK:
            return "\n"
        case MarkupRole.MATH_SOURCE:
            source = math_rule.extract(node) if math_rule else None
            if source is not None:
                return f"${source}$"
            if math_rule is not None and math_rule.empty is not None:
                return math_rule.empty
            return serialize_children(node, vocabulary, fragments)
        case MarkupRole.TRANSPARENT:
            return serialize_children(node, vocabulary, fragments)
        case _:
            opening, closing = _WRAPPERS[role]
            children = serialize_children(node, vocabulary, fragments)
            return f"{opening}{children}{closing}"
