"""Placeholder tokens for fragments that markup passes must not touch.

A protected fragment (rendered inline code, typeset math, or the outer HTML
of an opaque element) is swapped for a token while the substitution passes
run, then restored by exact index once they are done.

Token format: ``\\x02{kind}{index}\\x03`` where ``kind`` is a single letter.
STX/ETX control characters do not occur in text a user can type or a page
can render, so restoration never fires on accidental matches.
"""

from __future__ import annotations

import re
from enum import StrEnum

__all__ = [
    "PlaceholderError",
    "PlaceholderKind",
    "ProtectedFragments",
    "TOKEN_END",
    "TOKEN_START",
    "contains_tokens",
    "restore",
]

TOKEN_START = "\x02"
TOKEN_END = "\x03"

ANY_TOKEN_PATTERN = re.compile(r"\x02[CME](\d+)\x03")


class PlaceholderError(LookupError):
    """A token refers to a fragment that was never protected."""


class PlaceholderKind(StrEnum):
    """Kinds of protected fragment, one token letter each."""

    CODE = "C"
    MATH = "M"
    ELEMENT = "E"

    @property
    def template(self) -> str:
        return f"{TOKEN_START}{self.value}{{}}{TOKEN_END}"

    @property
    def pattern(self) -> re.Pattern[str]:
        return _PATTERNS[self]


_PATTERNS: dict[PlaceholderKind, re.Pattern[str]] = {
    kind: re.compile(rf"\x02{kind.value}(\d+)\x03") for kind in PlaceholderKind
}


def restore(kind: PlaceholderKind, text: str, fragments: list[str]) -> str:
    """Replace every ``kind`` token in *text* with its fragment.

    Raises:
        PlaceholderError: If a token index has no fragment.
    """

    def _fragment(m: re.Match[str]) -> str:
        index = int(m.group(1))
        try:
            return fragments[index]
        except IndexError:
            msg = f"no {kind.name.lower()} fragment for placeholder {index}"
            raise PlaceholderError(msg) from None

    return kind.pattern.sub(_fragment, text)


def contains_tokens(text: str) -> bool:
    """Return True if any placeholder token is still present in *text*."""
    return bool(ANY_TOKEN_PATTERN.search(text))


class ProtectedFragments:
    """Ordered, append-only fragment lists for one element's cycle."""

    def __init__(self) -> None:
        self._fragments: dict[PlaceholderKind, list[str]] = {
            kind: [] for kind in PlaceholderKind
        }

    def protect(self, kind: PlaceholderKind, fragment: str) -> str:
        """Store *fragment* and return the token standing in for it."""
        fragments = self._fragments[kind]
        fragments.append(fragment)
        return kind.template.format(len(fragments) - 1)

    def restore(self, kind: PlaceholderKind, text: str) -> str:
        return restore(kind, text, self._fragments[kind])

    def fragments(self, kind: PlaceholderKind) -> list[str]:
        return list(self._fragments[kind])

    def __len__(self) -> int:
        return sum(len(f) for f in self._fragments.values())
