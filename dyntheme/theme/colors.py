"""Hex/RGB conversion, luminance and brightness helpers."""

from __future__ import annotations

import math
import re
from typing import Sequence

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)
_STRICT_HEX_RE = re.compile(r"^#[0-9a-f]{6}$")

RGB = tuple[int, int, int]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, _round_half_up(value)))


def is_hex_color(value: object) -> bool:
    """Return ``True`` for canonical ``#rrggbb`` lowercase strings."""

    return isinstance(value, str) and bool(_STRICT_HEX_RE.match(value))


def rgb_to_hex(rgb: Sequence[float]) -> str:
    """Encode an RGB triple as ``#rrggbb``."""

    return "#" + "".join(f"{_clamp_channel(channel):02x}" for channel in rgb[:3])


def hex_to_rgb(value: str) -> RGB | None:
    """Decode ``#rrggbb`` (hash optional, any case); ``None`` when malformed."""

    match = _HEX_RE.match(value)
    if not match:
        return None
    r, g, b = (int(group, 16) for group in match.groups())
    return (r, g, b)


def _linearize(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: Sequence[int]) -> float:
    """sRGB relative luminance with BT.709 weights, in ``[0, 1]``."""

    r, g, b = (_linearize(channel) for channel in rgb[:3])
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def adjust_brightness(value: str, amount: float) -> str:
    """Shift every channel by ``amount * 255`` and clamp to ``[0, 255]``.

    Malformed input is returned unchanged.
    """

    rgb = hex_to_rgb(value)
    if rgb is None:
        return value
    return rgb_to_hex([channel + amount * 255 for channel in rgb])


__all__ = [
    "RGB",
    "adjust_brightness",
    "hex_to_rgb",
    "is_hex_color",
    "relative_luminance",
    "rgb_to_hex",
]
