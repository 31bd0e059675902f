"""Dominant colour extraction utilities."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter

from dyntheme.config.settings import Settings, get_settings
from dyntheme.imgproc.loader import ImageLoader, ImageLoadError, RgbaImage
from dyntheme.metrics.prometheus_exporter import (
    palette_extraction_total,
    palette_extractions_in_flight,
)
from dyntheme.theme.colors import RGB
from dyntheme.theme.palette import DEFAULT_PALETTE, ColorPalette, create_palette_from_colors

logger = logging.getLogger(__name__)

MIN_ALPHA = 128
MIN_BRIGHTNESS = 20
MAX_BRIGHTNESS = 235


def extract_dominant_colors(
    data: bytes,
    *,
    sample_stride: int = 10,
    bucket_size: int = 10,
    top_n: int = 5,
) -> list[RGB]:
    """Return up to ``top_n`` representative colours, most frequent first.

    Every ``sample_stride``-th pixel of the RGBA buffer is visited. Transparent,
    near-black and near-white pixels are skipped; the rest are bucketed by
    integer-dividing each channel by ``bucket_size``. Each bucket keeps the
    first pixel that landed in it as its representative.
    """

    counts: Counter[tuple[int, int, int]] = Counter()
    representatives: dict[tuple[int, int, int], RGB] = {}
    step = max(1, sample_stride) * 4

    for offset in range(0, len(data) - 3, step):
        r, g, b, a = data[offset], data[offset + 1], data[offset + 2], data[offset + 3]
        if a < MIN_ALPHA:
            continue
        brightness = (r + g + b) / 3
        if brightness < MIN_BRIGHTNESS or brightness > MAX_BRIGHTNESS:
            continue

        key = (r // bucket_size, g // bucket_size, b // bucket_size)
        counts[key] += 1
        representatives.setdefault(key, (r, g, b))

    return [representatives[key] for key, _ in counts.most_common(top_n)]


class PaletteExtractor:
    """Derives a :class:`ColorPalette` from an image reference.

    ``extract`` never raises: any failure resolves to ``DEFAULT_PALETTE``.
    """

    def __init__(self, loader: ImageLoader | None = None, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._loader = loader or ImageLoader(self._settings)

    async def close(self) -> None:
        await self._loader.close()

    def palette_from_image(self, image: RgbaImage) -> ColorPalette | None:
        """Analyse a decoded image; ``None`` when no pixel qualifies."""

        colors = extract_dominant_colors(
            image.data,
            sample_stride=self._settings.palette_sample_stride,
            bucket_size=self._settings.palette_bucket_size,
            top_n=self._settings.palette_top_colors,
        )
        if not colors:
            return None
        return create_palette_from_colors(colors)

    async def extract(self, image_ref: str) -> ColorPalette:
        """Load ``image_ref`` and return its palette, or the default one."""

        palette_extractions_in_flight.inc()
        try:
            image = await self._loader.load(image_ref)
            palette = await asyncio.to_thread(self.palette_from_image, image)
        except ImageLoadError as exc:
            logger.warning("Falling back to default palette for %s: %s", image_ref, exc)
            palette_extraction_total.labels(outcome="load_error").inc()
            return DEFAULT_PALETTE
        except Exception:
            logger.exception("Unexpected error while extracting palette from %s", image_ref)
            palette_extraction_total.labels(outcome="error").inc()
            return DEFAULT_PALETTE
        finally:
            palette_extractions_in_flight.dec()

        if palette is None:
            logger.info("No usable colours in %s; using default palette.", image_ref)
            palette_extraction_total.labels(outcome="empty").inc()
            return DEFAULT_PALETTE

        palette_extraction_total.labels(outcome="extracted").inc()
        logger.debug("Extracted palette %s from %s", palette, image_ref)
        return palette
