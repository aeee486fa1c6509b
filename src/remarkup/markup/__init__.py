"""Bidirectional inline markup pipeline.

Usage:
    from remarkup.markup import ProtectedFragments, render, serialize_children

    fragments = ProtectedFragments()
    text = serialize_children(element, vocabulary, fragments)
    html = render(text, features, templates, fragments, math_engine)
"""

from remarkup.markup.gating import needs_processing
from remarkup.markup.math import MathEngine, MathRenderError
from remarkup.markup.placeholders import (
    PlaceholderError,
    PlaceholderKind,
    ProtectedFragments,
)
from remarkup.markup.renderer import render
from remarkup.markup.serializer import serialize, serialize_children
from remarkup.markup.vocabulary import MarkupRole, RenderTemplates, TagVocabulary

__all__ = [
    "MarkupRole",
    "MathEngine",
    "MathRenderError",
    "PlaceholderError",
    "PlaceholderKind",
    "ProtectedFragments",
    "RenderTemplates",
    "TagVocabulary",
    "needs_processing",
    "render",
    "serialize",
    "serialize_children",
]
