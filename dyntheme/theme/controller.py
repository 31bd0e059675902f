"""Per-view owner of the current palette."""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, Protocol

from dyntheme.metrics.prometheus_exporter import theme_palette_published_total
from dyntheme.theme.palette import (
    DARK_BACKGROUND,
    DARK_SURFACE,
    DARK_TEXT,
    DARK_TEXT_SECONDARY,
    LIGHT_BACKGROUND,
    LIGHT_SURFACE,
    LIGHT_TEXT,
    LIGHT_TEXT_SECONDARY,
    ColorPalette,
    neutral_palette,
)
from dyntheme.theme.preference import ThemePreference, ThemePreferenceStore

logger = logging.getLogger(__name__)

PaletteListener = Callable[[ColorPalette], None]


class PaletteSource(Protocol):
    async def extract(self, image_ref: str) -> ColorPalette: ...


class ControllerState(str, Enum):
    """Whether an extraction is currently awaited."""

    IDLE = "idle"
    EXTRACTING = "extracting"


def reconcile_palette(palette: ColorPalette, preference: ThemePreference | str) -> ColorPalette:
    """Force ``palette`` onto the surfaces of the preferred theme.

    A dark palette shown in light mode gets the light surfaces and swaps
    ``primary`` with ``accent``; a light palette shown in dark mode only gets
    the dark surfaces. Applying one then the other does not restore the
    original hues.
    """

    preference = ThemePreference(preference)
    if preference is ThemePreference.LIGHT and palette.is_dark:
        return replace(
            palette,
            background=LIGHT_BACKGROUND,
            surface=LIGHT_SURFACE,
            text=LIGHT_TEXT,
            text_secondary=LIGHT_TEXT_SECONDARY,
            primary=palette.accent,
            accent=palette.primary,
            is_dark=False,
        )
    if preference is ThemePreference.DARK and not palette.is_dark:
        return replace(
            palette,
            background=DARK_BACKGROUND,
            surface=DARK_SURFACE,
            text=DARK_TEXT,
            text_secondary=DARK_TEXT_SECONDARY,
            is_dark=True,
        )
    return palette


class ThemeController:
    """Publishes one palette to every reader of a view.

    Overlapping ``update_palette`` calls are allowed; a result is dropped if a
    call started later has already published.
    """

    def __init__(self, extractor: PaletteSource, preferences: ThemePreferenceStore) -> None:
        self._extractor = extractor
        self._preferences = preferences
        self._palette = neutral_palette(preferences.current)
        self._listeners: list[PaletteListener] = []
        self._issued = 0
        self._published_seq = 0
        self._in_flight = 0
        self._unsubscribe_preferences = preferences.subscribe(self._on_preference_change)

    @property
    def palette(self) -> ColorPalette:
        return self._palette

    @property
    def preference(self) -> ThemePreference:
        return self._preferences.current

    @property
    def state(self) -> ControllerState:
        return ControllerState.EXTRACTING if self._in_flight else ControllerState.IDLE

    def subscribe(self, listener: PaletteListener) -> Callable[[], None]:
        """Register ``listener`` for every published palette."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def update_palette(self, image_ref: str) -> ColorPalette:
        """Extract a palette from ``image_ref``, reconcile it and publish it."""

        self._issued += 1
        seq = self._issued
        self._in_flight += 1
        try:
            extracted = await self._extractor.extract(image_ref)
        except Exception:
            logger.exception("Palette extraction failed for %s; keeping current palette", image_ref)
            return self._palette
        finally:
            self._in_flight -= 1

        if seq < self._published_seq:
            logger.debug("Dropping superseded palette for %s", image_ref)
            return self._palette

        self._published_seq = seq
        self._publish(reconcile_palette(extracted, self._preferences.current), source="image")
        return self._palette

    def reset_palette(self) -> ColorPalette:
        """Publish the neutral palette for the current preference."""

        self._publish(neutral_palette(self._preferences.current), source="reset")
        return self._palette

    def close(self) -> None:
        """Detach from the preference store."""

        self._unsubscribe_preferences()
        self._listeners.clear()

    def _on_preference_change(self, _preference: ThemePreference) -> None:
        self.reset_palette()

    def _publish(self, palette: ColorPalette, *, source: str) -> None:
        self._palette = palette
        theme_palette_published_total.labels(source=source).inc()
        for listener in list(self._listeners):
            try:
                listener(palette)
            except Exception:
                logger.exception("Palette listener failed")
