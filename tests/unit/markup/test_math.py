"""Tests for the math typesetting boundary."""

from __future__ import annotations

import pytest

from remarkup.markup.math import (
    Latex2MathMLEngine,
    MathEngine,
    MathRenderError,
    get_math_engine,
)


class TestLatex2MathMLEngine:
    """Tests for the default MathML engine."""

    def test_typesets_inline_mathml(self) -> None:
        """A simple superscript becomes inline MathML."""
        result = Latex2MathMLEngine().typeset("x^2")
        assert result.startswith("<math")
        assert 'display="inline"' in result
        assert "<msup>" in result

    def test_empty_source_fails(self) -> None:
        """Whitespace-only math is reported as a render error."""
        with pytest.raises(MathRenderError):
            Latex2MathMLEngine().typeset("   ")

    def test_implements_protocol(self) -> None:
        assert isinstance(Latex2MathMLEngine(), MathEngine)


class TestGetMathEngine:
    """Tests for resolving configured engine names."""

    def test_latex2mathml(self) -> None:
        assert isinstance(get_math_engine("latex2mathml"), Latex2MathMLEngine)

    def test_none_disables_math(self) -> None:
        assert get_math_engine("none") is None

    def test_unknown_name_logs_and_disables(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An unknown name does not raise."""
        assert get_math_engine("mathjax") is None
        assert "mathjax" in caplog.text
