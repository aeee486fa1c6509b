"""Package metadata tests."""

from remarkup import __version__


def test_version_exists() -> None:
    """Package should have a version string."""
    assert isinstance(__version__, str)
    assert __version__


def test_version_format() -> None:
    """Version should follow semver format (major.minor.patch)."""
    parts = __version__.split(".")
    assert len(parts) == 3, f"Version should be major.minor.patch, got: {__version__}"
    assert all(part.isdigit() for part in parts)
