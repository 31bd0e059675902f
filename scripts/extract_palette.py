"""Print the reconciled palette for an image reference."""

from __future__ import annotations

import argparse
import asyncio
import json

from dyntheme.imgproc.color_extract import PaletteExtractor
from dyntheme.monitoring.logging import configure_logging
from dyntheme.theme.controller import ThemeController
from dyntheme.theme.palette import ColorPalette
from dyntheme.theme.preference import ThemePreference, ThemePreferenceStore


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("image", help="Image URL, data URL or local path.")
    parser.add_argument(
        "--theme",
        choices=[preference.value for preference in ThemePreference],
        default=ThemePreference.DARK.value,
        help="Theme preference the palette is reconciled against.",
    )
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


async def extract(image: str, theme: str) -> ColorPalette:
    extractor = PaletteExtractor()
    controller = ThemeController(extractor, ThemePreferenceStore(theme))
    try:
        return await controller.update_palette(image)
    finally:
        controller.close()
        await extractor.close()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    palette = asyncio.run(extract(args.image, args.theme))
    print(json.dumps(palette.to_dict(), indent=2))


if __name__ == "__main__":
    main()
