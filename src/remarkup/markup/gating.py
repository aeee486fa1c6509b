"""Decide whether an element's canonical text is worth re-rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from remarkup.settings_store import FeatureSettings

__all__ = ["active_markers", "needs_processing"]

_ASCII_WHITESPACE = " \t\n\r\f\v"


def active_markers(features: FeatureSettings) -> tuple[str, ...]:
    """Markers whose renderer pass is currently enabled."""
    markers: list[str] = []
    if features.italic:
        markers.append("*")
    if features.bold:
        markers.append("**")
    if features.latex:
        markers.append("$")
    if features.code:
        markers.append("`")
    if features.strike:
        markers.append("~~")
    if features.underline:
        markers.append("<u>")
    return tuple(markers)


def needs_processing(text: str, features: FeatureSettings) -> bool:
    """Return True if *text* contains markup an enabled pass would handle.

    Must agree with the passes ``render`` runs, otherwise elements holding
    unhandled markup get marked processed.
    """
    if not text.strip(_ASCII_WHITESPACE):
        return False
    return any(marker in text for marker in active_markers(features))
