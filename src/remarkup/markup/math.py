"""Math typesetting boundary.

The renderer only needs ``typeset(source) -> markup`` that raises
``MathRenderError`` when the source cannot be typeset. The default engine
converts TeX to presentation MathML with latex2mathml.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

__all__ = [
    "Latex2MathMLEngine",
    "MathEngine",
    "MathRenderError",
    "get_math_engine",
]

logger = logging.getLogger(__name__)


class MathRenderError(ValueError):
    """The math source could not be typeset."""


@runtime_checkable
class MathEngine(Protocol):
    """Turns an inline TeX source string into HTML-embeddable markup."""

    def typeset(self, source: str) -> str:
        """Return markup for *source*.

        Raises:
            MathRenderError: If *source* is malformed.
        """
        ...


class Latex2MathMLEngine:
    """Inline MathML via ``latex2mathml.converter.convert``."""

    def typeset(self, source: str) -> str:
        from latex2mathml.converter import convert  # noqa: PLC0415

        if not source.strip():
            msg = "empty math source"
            raise MathRenderError(msg)
        try:
            return convert(source, display="inline")
        except Exception as exc:
            # latex2mathml raises a family of unrelated exception classes
            raise MathRenderError(f"cannot typeset {source!r}: {exc}") from exc


def get_math_engine(name: str) -> MathEngine | None:
    """Resolve a configured engine name; ``"none"`` disables math."""
    match name:
        case "latex2mathml":
            return Latex2MathMLEngine()
        case "none":
            return None
        case _:
            logger.warning("Unknown math engine '%s', math rendering disabled", name)
            return None
