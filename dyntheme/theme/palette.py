"""Semantic colour palette value type and its derivation from dominant colours."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Sequence

from dyntheme.theme.colors import adjust_brightness, is_hex_color, relative_luminance, rgb_to_hex
from dyntheme.theme.preference import ThemePreference

DARK_BACKGROUND = "#0f172a"
DARK_SURFACE = "#1e293b"
DARK_TEXT = "#f8fafc"
DARK_TEXT_SECONDARY = "#cbd5e1"

LIGHT_BACKGROUND = "#ffffff"
LIGHT_SURFACE = "#f8fafc"
LIGHT_TEXT = "#1e293b"
LIGHT_TEXT_SECONDARY = "#475569"

LUMINANCE_DARK_THRESHOLD = 0.5

_CAMEL_CASE = {"text_secondary": "textSecondary", "is_dark": "isDark"}


@dataclass(frozen=True, slots=True)
class ColorPalette:
    """Colours handed to presentation code; all fields are ``#rrggbb``."""

    primary: str
    secondary: str
    background: str
    surface: str
    text: str
    text_secondary: str
    accent: str
    is_dark: bool

    def __post_init__(self) -> None:
        for item in fields(self):
            if item.name == "is_dark":
                continue
            value = getattr(self, item.name)
            if not is_hex_color(value):
                raise ValueError(f"Palette field {item.name!r} is not a #rrggbb colour: {value!r}")

    def to_dict(self) -> dict[str, str | bool]:
        """Return the palette with the camelCase keys used by the frontend."""

        return {_CAMEL_CASE.get(key, key): value for key, value in asdict(self).items()}


DEFAULT_PALETTE = ColorPalette(
    primary="#8b5cf6",
    secondary="#3b82f6",
    background=DARK_BACKGROUND,
    surface=DARK_SURFACE,
    text=DARK_TEXT,
    text_secondary=DARK_TEXT_SECONDARY,
    accent="#ec4899",
    is_dark=True,
)


def neutral_palette(preference: ThemePreference | str) -> ColorPalette:
    """Default hues on the fixed surfaces matching ``preference``."""

    if ThemePreference(preference) is ThemePreference.LIGHT:
        return ColorPalette(
            primary=DEFAULT_PALETTE.primary,
            secondary=DEFAULT_PALETTE.secondary,
            background=LIGHT_BACKGROUND,
            surface=LIGHT_SURFACE,
            text=LIGHT_TEXT,
            text_secondary=LIGHT_TEXT_SECONDARY,
            accent=DEFAULT_PALETTE.accent,
            is_dark=False,
        )
    return DEFAULT_PALETTE


def create_palette_from_colors(colors: Sequence[Sequence[int]]) -> ColorPalette:
    """Build a palette from dominant colours ordered by frequency.

    The first colour decides polarity. Dark palettes derive background and
    surface by darkening it further; light palettes darken the hues and lift
    background and surface towards white, so the fixed text colours always
    stay legible.
    """

    if not colors:
        return DEFAULT_PALETTE

    primary = colors[0]
    secondary = colors[1] if len(colors) > 1 else primary
    is_dark = relative_luminance(primary) < LUMINANCE_DARK_THRESHOLD

    primary_hex = rgb_to_hex(primary)
    secondary_hex = rgb_to_hex(secondary)

    if is_dark:
        return ColorPalette(
            primary=primary_hex,
            secondary=secondary_hex,
            background=adjust_brightness(primary_hex, -0.8),
            surface=adjust_brightness(primary_hex, -0.6),
            text=DARK_TEXT,
            text_secondary=DARK_TEXT_SECONDARY,
            accent=adjust_brightness(secondary_hex, 0.3),
            is_dark=True,
        )
    return ColorPalette(
        primary=adjust_brightness(primary_hex, -0.2),
        secondary=adjust_brightness(secondary_hex, -0.2),
        background=adjust_brightness(primary_hex, 0.8),
        surface=adjust_brightness(primary_hex, 0.9),
        text=LIGHT_TEXT,
        text_secondary=LIGHT_TEXT_SECONDARY,
        accent=adjust_brightness(secondary_hex, -0.1),
        is_dark=False,
    )
