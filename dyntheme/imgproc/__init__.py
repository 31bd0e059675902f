"""Image loading and dominant colour extraction."""

from .loader import ImageLoader, ImageLoadError, RgbaImage, decode_rgba
from .color_extract import PaletteExtractor, extract_dominant_colors

__all__ = [
    "ImageLoadError",
    "ImageLoader",
    "PaletteExtractor",
    "RgbaImage",
    "decode_rgba",
    "extract_dominant_colors",
]
