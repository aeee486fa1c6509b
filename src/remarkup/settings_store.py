"""Persisted user settings: feature toggles and per-category colour overrides.

The store is a JSON file. ``load()`` merges whatever is stored over the
defaults (every toggle on, no colour overrides). ``save()`` persists a full
replacement object and hands it to every subscriber.
``remarkup.orchestrator.follow_settings`` subscribes a running re-renderer's
notification queue.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError

__all__ = [
    "STYLE_CATEGORIES",
    "TOGGLE_NAMES",
    "ColorOverride",
    "FeatureSettings",
    "SettingsStore",
    "SettingsStoreError",
    "UserSettings",
]

logger = logging.getLogger(__name__)

StyleCategory: TypeAlias = Literal["bold", "italic", "strike", "underline", "code", "latex"]

TOGGLE_NAMES = ("enabled", "latex", "bold", "italic", "strike", "underline", "code")
STYLE_CATEGORIES: tuple[StyleCategory, ...] = (
    "bold",
    "italic",
    "strike",
    "underline",
    "code",
    "latex",
)


class SettingsStoreError(OSError):
    """The settings file could not be written."""


class FeatureSettings(BaseModel):
    """Feature toggles. ``enabled`` gates the whole re-render pass."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    latex: bool = True
    bold: bool = True
    italic: bool = True
    strike: bool = True
    underline: bool = True
    code: bool = True


class ColorOverride(BaseModel):
    """Colour/opacity/custom CSS applied to one style category."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    color: str = ""
    opacity: int = Field(default=100, ge=0, le=100)
    custom_css: str = Field(default="", alias="customCss")


class UserSettings(BaseModel):
    """Full settings object as stored and as delivered on update."""

    model_config = ConfigDict(frozen=True)

    features: FeatureSettings = FeatureSettings()
    colors: dict[StyleCategory, ColorOverride | None] = Field(
        default_factory=lambda: dict.fromkeys(STYLE_CATEGORIES)
    )

    @classmethod
    def from_stored(cls, data: dict) -> UserSettings:
        """Build from the flat stored layout (toggles at top level)."""
        toggles = {k: data[k] for k in TOGGLE_NAMES if k in data}
        colors = dict.fromkeys(STYLE_CATEGORIES)
        colors.update(data.get("colors") or {})
        return cls(features=FeatureSettings(**toggles), colors=colors)

    def to_stored(self) -> dict:
        data: dict = self.features.model_dump()
        data["colors"] = {
            cat: (ov.model_dump(by_alias=True) if ov is not None else None)
            for cat, ov in self.colors.items()
        }
        return data


SettingsListener: TypeAlias = Callable[[UserSettings], None]


class SettingsStore:
    """JSON-file settings store with change subscribers."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._listeners: list[SettingsListener] = []

    def load(self) -> UserSettings:
        """Return stored settings merged over defaults.

        A missing, unreadable or invalid file yields the defaults.
        """
        if not self.path.is_file():
            return UserSettings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return UserSettings.from_stored(data)
        except (OSError, json.JSONDecodeError, ValidationError, TypeError):
            logger.warning(
                "Ignoring unreadable settings file %s", self.path, exc_info=True
            )
            return UserSettings()

    def save(self, settings: UserSettings) -> None:
        """Persist *settings* and notify subscribers.

        Raises:
            SettingsStoreError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(settings.to_stored(), indent=2), encoding="utf-8"
            )
        except OSError as exc:
            msg = f"cannot write settings to {self.path}"
            raise SettingsStoreError(msg) from exc

        logger.info("Settings saved to %s", self.path)
        for listener in list(self._listeners):
            listener(settings)

    def set_toggle(self, name: str, value: bool) -> UserSettings:
        """Change one toggle and save the full settings object."""
        if name not in TOGGLE_NAMES:
            msg = f"unknown toggle '{name}' (expected one of {', '.join(TOGGLE_NAMES)})"
            raise KeyError(msg)
        current = self.load()
        features = current.features.model_copy(update={name: value})
        updated = current.model_copy(update={"features": features})
        self.save(updated)
        return updated

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
