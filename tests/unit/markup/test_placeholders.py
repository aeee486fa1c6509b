"""Tests for placeholder tokens and protected-fragment restoration."""

from __future__ import annotations

import pytest

from remarkup.markup.placeholders import (
    PlaceholderError,
    PlaceholderKind,
    ProtectedFragments,
    contains_tokens,
    restore,
)


class TestProtect:
    """Tests for issuing tokens."""

    def test_tokens_are_index_addressed_per_kind(
        self, fragments: ProtectedFragments
    ) -> None:
        """Each kind numbers its own fragments from zero."""
        assert fragments.protect(PlaceholderKind.CODE, "<code>a</code>") == "\x02C0\x03"
        assert fragments.protect(PlaceholderKind.CODE, "<code>b</code>") == "\x02C1\x03"
        assert fragments.protect(PlaceholderKind.MATH, "<m/>") == "\x02M0\x03"
        assert fragments.protect(PlaceholderKind.ELEMENT, "<img>") == "\x02E0\x03"
        assert len(fragments) == 4

    def test_tokens_contain_no_printable_delimiters(
        self, fragments: ProtectedFragments
    ) -> None:
        """Tokens are bracketed by control characters, not typeable text."""
        token = fragments.protect(PlaceholderKind.ELEMENT, "<span>")
        assert token[0] == "\x02"
        assert token[-1] == "\x03"
        assert not token[0].isprintable()

    def test_fragments_are_append_only(self, fragments: ProtectedFragments) -> None:
        """Returned fragment lists are copies."""
        fragments.protect(PlaceholderKind.CODE, "x")
        fragments.fragments(PlaceholderKind.CODE).append("y")
        assert fragments.fragments(PlaceholderKind.CODE) == ["x"]


class TestRestore:
    """Tests for restoring fragments by exact index."""

    def test_restores_every_occurrence(self, fragments: ProtectedFragments) -> None:
        """A token appearing twice is restored twice."""
        token = fragments.protect(PlaceholderKind.CODE, "<code>x</code>")
        result = fragments.restore(PlaceholderKind.CODE, f"{token} and {token}")
        assert result == "<code>x</code> and <code>x</code>"

    def test_restores_only_requested_kind(self, fragments: ProtectedFragments) -> None:
        """Math tokens survive a code restoration."""
        code = fragments.protect(PlaceholderKind.CODE, "<code>c</code>")
        math = fragments.protect(PlaceholderKind.MATH, "<m>x</m>")
        result = fragments.restore(PlaceholderKind.CODE, f"{code}{math}")
        assert result == f"<code>c</code>{math}"
        assert contains_tokens(result)

    def test_fragment_text_is_inserted_literally(
        self, fragments: ProtectedFragments
    ) -> None:
        """Backslashes and group references in fragments are not expanded."""
        token = fragments.protect(PlaceholderKind.MATH, r"\frac{1}{2} \1 $0")
        assert fragments.restore(PlaceholderKind.MATH, token) == r"\frac{1}{2} \1 $0"

    def test_lookalike_text_is_not_a_token(self) -> None:
        """Printable text shaped like a token is left alone."""
        text = "C0 E12 __CODE_0__"
        assert restore(PlaceholderKind.CODE, text, ["boom"]) == text
        assert not contains_tokens(text)

    def test_unknown_index_raises(self) -> None:
        """A token without a fragment is an error, never silently dropped."""
        with pytest.raises(PlaceholderError, match="placeholder 3"):
            restore(PlaceholderKind.ELEMENT, "\x02E3\x03", ["only one"])
