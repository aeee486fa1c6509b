"""Shared fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from selectolax.lexbor import LexborHTMLParser, LexborNode

from remarkup.markup.math import MathRenderError
from remarkup.markup.placeholders import ProtectedFragments
from remarkup.settings_store import FeatureSettings


class FakeMathEngine:
    """Typesets ``src`` as ``<m>src</m>``; fails on sources containing ``\\bad``."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def typeset(self, source: str) -> str:
        self.calls.append(source)
        if "\\bad" in source:
            msg = f"cannot typeset {source!r}"
            raise MathRenderError(msg)
        return f"<m>{source}</m>"


def first(html: str, selector: str = "p") -> LexborNode:
    """Parse *html* and return the first node matching *selector*."""
    node = LexborHTMLParser(html).css_first(selector)
    assert node is not None, f"no {selector} in {html!r}"
    return node


@pytest.fixture
def parse_first() -> Callable[..., LexborNode]:
    return first


@pytest.fixture
def features() -> FeatureSettings:
    return FeatureSettings()


@pytest.fixture
def fragments() -> ProtectedFragments:
    return ProtectedFragments()


@pytest.fixture
def math_engine() -> FakeMathEngine:
    return FakeMathEngine()
