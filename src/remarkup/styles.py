"""Generated style sheet for per-category colour overrides.

One rule per style category that has an override::

    b.remarkup-bold { color: #c00 !important; opacity: 0.8 !important; }

Every custom CSS declaration is forced ``!important`` so it wins over the
host page's own rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from remarkup.settings_store import ColorOverride

__all__ = ["build_rule", "build_stylesheet", "force_important"]

_IMPORTANT = "!important"


def force_important(custom_css: str) -> list[str]:
    """Split *custom_css* into declarations, each ending in ``!important``."""
    declarations: list[str] = []
    for raw in custom_css.split(";"):
        decl = raw.strip()
        if not decl or ":" not in decl:
            continue
        if not decl.lower().endswith(_IMPORTANT):
            decl = f"{decl} {_IMPORTANT}"
        declarations.append(decl)
    return declarations


def _format_opacity(opacity: int) -> str:
    return f"{opacity / 100:g}"


def build_rule(selector: str, override: ColorOverride) -> str:
    """Build one CSS rule for *selector* from *override*."""
    declarations: list[str] = []
    if override.color:
        declarations.append(f"color: {override.color} {_IMPORTANT}")
    declarations.append(f"opacity: {_format_opacity(override.opacity)} {_IMPORTANT}")
    declarations.extend(force_important(override.custom_css))
    body = "; ".join(declarations)
    return f"{selector} {{ {body}; }}"


def build_stylesheet(
    colors: Mapping[str, ColorOverride | None],
    selectors: Mapping[str, str],
) -> str:
    """Build the style sheet for every category with a non-null override.

    Args:
        colors: Style category -> override (or None for "no override").
        selectors: Style category -> CSS selector of the rendered element.

    Returns:
        CSS text, one rule per line; empty if there are no overrides.
    """
    rules = [
        build_rule(selectors[category], override)
        for category, override in colors.items()
        if override is not None and selectors.get(category)
    ]
    return "\n".join(rules)
