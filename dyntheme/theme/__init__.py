"""Palette value types, preference handling and the per-view controller."""

from .colors import adjust_brightness, hex_to_rgb, relative_luminance, rgb_to_hex
from .preference import ThemePreference, ThemePreferenceStore, preference_from_cookie
from .palette import DEFAULT_PALETTE, ColorPalette, create_palette_from_colors, neutral_palette
from .controller import ControllerState, ThemeController, reconcile_palette

__all__ = [
    "ColorPalette",
    "ControllerState",
    "DEFAULT_PALETTE",
    "ThemeController",
    "ThemePreference",
    "ThemePreferenceStore",
    "adjust_brightness",
    "create_palette_from_colors",
    "hex_to_rgb",
    "neutral_palette",
    "preference_from_cookie",
    "reconcile_palette",
    "relative_luminance",
    "rgb_to_hex",
]
