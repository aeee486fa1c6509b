"""Tests for the generated colour style sheet."""

from __future__ import annotations

from remarkup.settings_store import ColorOverride
from remarkup.sites.aistudio import AIStudioAdapter
from remarkup.sites.gemini import GeminiAdapter
from remarkup.styles import build_rule, build_stylesheet, force_important


class TestForceImportant:
    """Tests for custom CSS declaration handling."""

    def test_appends_important(self) -> None:
        assert force_important("font-weight: 700; text-decoration: none") == [
            "font-weight: 700 !important",
            "text-decoration: none !important",
        ]

    def test_keeps_existing_important(self) -> None:
        assert force_important("color: red !important;") == ["color: red !important"]

    def test_drops_empty_and_malformed(self) -> None:
        assert force_important(" ; junk ;") == []


class TestBuildRule:
    """Tests for a single category rule."""

    def test_full_override(self) -> None:
        override = ColorOverride(
            color="#ff0000", opacity=50, custom_css="font-weight: 700"
        )
        assert build_rule("b.remarkup-bold", override) == (
            "b.remarkup-bold { color: #ff0000 !important; "
            "opacity: 0.5 !important; font-weight: 700 !important; }"
        )

    def test_without_color(self) -> None:
        """An empty colour is omitted; opacity is always emitted."""
        assert build_rule("s", ColorOverride(opacity=100)) == (
            "s { opacity: 1 !important; }"
        )


class TestBuildStylesheet:
    """Tests for the whole sheet."""

    def test_only_non_null_categories(self) -> None:
        colors = {
            "bold": ColorOverride(color="blue", opacity=80),
            "italic": None,
            "code": ColorOverride(color="green", opacity=0),
        }
        sheet = build_stylesheet(colors, GeminiAdapter().style_selectors)
        assert sheet.splitlines() == [
            "b.remarkup-bold { color: blue !important; opacity: 0.8 !important; }",
            "code.remarkup-code { color: green !important; opacity: 0 !important; }",
        ]

    def test_no_overrides_is_empty(self) -> None:
        sheet = build_stylesheet(
            dict.fromkeys(("bold", "italic")), GeminiAdapter().style_selectors
        )
        assert sheet == ""

    def test_aistudio_selectors(self) -> None:
        """Selectors follow each site's output templates."""
        selectors = AIStudioAdapter().style_selectors
        assert selectors["italic"] == "span.remarkup-italic"
        assert selectors["code"] == "span.inline-code"
        assert selectors["bold"] == "strong"
