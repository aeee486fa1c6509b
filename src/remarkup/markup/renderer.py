"""Expand canonical markup text into corrected HTML.

The passes run in a fixed order; each one only ever sees placeholders, never
the HTML produced by an earlier protected pass:

1. HTML-escape ``&``, ``<`` and ``>``.
2. Inline code -> code placeholders (so markup inside code stays literal).
3. ``$...$`` math -> math placeholders (failed typesetting leaves the text).
4. Bold, italic, strike, underline. Underline matches the *escaped*
   ``&lt;u&gt;...&lt;/u&gt;`` produced by step 1.
5. Restore code placeholders.
6. ``\\n`` -> line break element.
7. Restore math placeholders, then element placeholders.
"""

from __future__ import annotations

import html
import logging
import re
from typing import TYPE_CHECKING

from remarkup.markup.math import MathRenderError
from remarkup.markup.placeholders import PlaceholderKind, ProtectedFragments
from remarkup.markup.vocabulary import RenderTemplates

if TYPE_CHECKING:
    from remarkup.markup.math import MathEngine
    from remarkup.settings_store import FeatureSettings

__all__ = ["render"]

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(r"(`+)(.*?)\1")
# Math never spans a placeholder token, a literal "$", or an escaped "\$".
_MATH_PATTERN = re.compile(r"(?<!\\)\$([^$\x02\x03]+?)\$")
_BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_PATTERN = re.compile(r"(?<!\*)\*(?!\*)(.*?)\*")
_STRIKE_PATTERN = re.compile(r"~~(.*?)~~")
_UNDERLINE_PATTERN = re.compile(r"&lt;u&gt;(.*?)&lt;/u&gt;")


def _unescape_math(source: str) -> str:
    return source.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def _protect_code(
    text: str, templates: RenderTemplates, fragments: ProtectedFragments
) -> str:
    def _sub(m: re.Match[str]) -> str:
        fragment = templates.code.format(m.group(2))
        return fragments.protect(PlaceholderKind.CODE, fragment)

    return _CODE_PATTERN.sub(_sub, text)


def _protect_math(
    text: str,
    templates: RenderTemplates,
    fragments: ProtectedFragments,
    engine: MathEngine,
) -> str:
    def _sub(m: re.Match[str]) -> str:
        source = _unescape_math(m.group(1))
        try:
            rendered = engine.typeset(source)
        except MathRenderError as exc:
            logger.debug("Leaving math source as text: %s", exc)
            return m.group(0)
        fragment = templates.math.format(
            source=html.escape(source, quote=True), rendered=rendered
        )
        return fragments.protect(PlaceholderKind.MATH, fragment)

    return _MATH_PATTERN.sub(_sub, text)


def _wrap(pattern: re.Pattern[str], template: str, text: str) -> str:
    return pattern.sub(lambda m: template.format(m.group(1)), text)


def render(
    text: str,
    features: FeatureSettings,
    templates: RenderTemplates | None = None,
    fragments: ProtectedFragments | None = None,
    math_engine: MathEngine | None = None,
) -> str:
    """Render canonical markup *text* to HTML.

    Args:
        text: Canonical markup produced by ``serialize``.
        features: Which passes are enabled.
        templates: Site-specific output HTML; defaults to plain tags.
        fragments: Fragment store shared with ``serialize`` so element
            placeholders it issued are restored here.
        math_engine: Typesetter for ``$...$``; ``None`` skips the math pass.

    Returns:
        HTML with every placeholder restored.
    """
    templates = templates or RenderTemplates()
    fragments = fragments if fragments is not None else ProtectedFragments()

    out = html.escape(text, quote=False)

    if features.code:
        out = _protect_code(out, templates, fragments)

    if features.latex and math_engine is not None:
        out = _protect_math(out, templates, fragments, math_engine)

    if features.bold:
        out = _wrap(_BOLD_PATTERN, templates.bold, out)
    if features.italic:
        out = _wrap(_ITALIC_PATTERN, templates.italic, out)
    if features.strike:
        out = _wrap(_STRIKE_PATTERN, templates.strike, out)
    if features.underline:
        out = _wrap(_UNDERLINE_PATTERN, templates.underline, out)

    out = fragments.restore(PlaceholderKind.CODE, out)
    out = out.replace("\n", templates.line_break)
    out = fragments.restore(PlaceholderKind.MATH, out)
    return fragments.restore(PlaceholderKind.ELEMENT, out)
