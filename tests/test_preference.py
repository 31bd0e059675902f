"""Tests for the theme preference store and cookie parsing."""

from __future__ import annotations

import pytest

from dyntheme.theme.preference import ThemePreference, ThemePreferenceStore, preference_from_cookie


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("light", ThemePreference.LIGHT),
        ("dark", ThemePreference.DARK),
        (" Dark ", ThemePreference.DARK),
        ("system", None),
        ("", None),
        (None, None),
    ],
)
def test_preference_from_cookie(raw: str | None, expected: ThemePreference | None) -> None:
    assert preference_from_cookie(raw) is expected


def test_toggle_flips_between_light_and_dark() -> None:
    store = ThemePreferenceStore()

    assert store.current is ThemePreference.DARK
    assert store.toggle() is ThemePreference.LIGHT
    assert store.toggle() is ThemePreference.DARK


def test_listeners_fire_only_on_change() -> None:
    store = ThemePreferenceStore("light")
    seen: list[ThemePreference] = []
    unsubscribe = store.subscribe(seen.append)

    store.set(ThemePreference.LIGHT)
    store.set("dark")
    unsubscribe()
    store.toggle()

    assert seen == [ThemePreference.DARK]


def test_invalid_preference_is_rejected() -> None:
    with pytest.raises(ValueError):
        ThemePreferenceStore("sepia")
