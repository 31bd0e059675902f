"""User light/dark preference and its cookie representation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

THEME_COOKIE_NAME = "theme"
THEME_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


class ThemePreference(str, Enum):
    """Theme chosen by the user through the toggle."""

    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "ThemePreference":
        return ThemePreference.DARK if self is ThemePreference.LIGHT else ThemePreference.LIGHT


def preference_from_cookie(value: str | None) -> ThemePreference | None:
    """Parse a ``theme`` cookie value, ignoring anything unexpected."""

    if not value:
        return None
    try:
        return ThemePreference(value.strip().lower())
    except ValueError:
        return None


PreferenceListener = Callable[[ThemePreference], None]


class ThemePreferenceStore:
    """Holds the active preference and notifies listeners when it changes."""

    def __init__(self, initial: ThemePreference | str = ThemePreference.DARK) -> None:
        self._current = ThemePreference(initial)
        self._listeners: list[PreferenceListener] = []

    @property
    def current(self) -> ThemePreference:
        return self._current

    def set(self, preference: ThemePreference | str) -> ThemePreference:
        """Replace the preference; listeners fire only on an actual change."""

        new_value = ThemePreference(preference)
        if new_value is self._current:
            return new_value
        self._current = new_value
        logger.debug("Theme preference changed to %s", new_value.value)
        for listener in list(self._listeners):
            try:
                listener(new_value)
            except Exception:
                logger.exception("Theme preference listener failed")
        return new_value

    def toggle(self) -> ThemePreference:
        """Flip between light and dark."""

        return self.set(self._current.toggled())

    def subscribe(self, listener: PreferenceListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
