"""Shared fixtures for building test images."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image


def _png_bytes(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> Callable[[Image.Image], bytes]:
    return _png_bytes


@pytest.fixture
def png_data_url() -> Callable[[Image.Image], str]:
    def _encode(image: Image.Image) -> str:
        return "data:image/png;base64," + base64.b64encode(_png_bytes(image)).decode("ascii")

    return _encode


@pytest.fixture
def dominant_dark_image() -> Image.Image:
    """5000 pixels of (30, 30, 30) followed by 500 pixels of (200, 180, 150)."""

    image = Image.new("RGBA", (100, 55), (30, 30, 30, 255))
    image.paste((200, 180, 150, 255), (0, 50, 100, 55))
    return image


@pytest.fixture
def write_png(tmp_path: Path) -> Callable[..., Path]:
    def _write(image: Image.Image, name: str = "image.png") -> Path:
        path = tmp_path / name
        image.save(path, format="PNG")
        return path

    return _write
