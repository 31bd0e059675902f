"""Tests for resolving image references into RGBA buffers."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest
from PIL import Image

from dyntheme.config.settings import Settings
from dyntheme.imgproc.loader import ImageLoader, ImageLoadError, decode_rgba


def _transport(png: bytes) -> httpx.MockTransport:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ok.png":
            return httpx.Response(200, content=png, headers={"content-type": "image/png"})
        return httpx.Response(404, text="not found")

    return httpx.MockTransport(_handler)


def test_decode_rgba_converts_rgb_to_four_channels(png_bytes: Callable[[Image.Image], bytes]) -> None:
    image = decode_rgba(png_bytes(Image.new("RGB", (3, 2), (10, 20, 30))))

    assert (image.width, image.height, image.pixel_count) == (3, 2, 6)
    assert image.data[:4] == bytes((10, 20, 30, 255))
    assert len(image.data) == 24


def test_decode_rgba_rejects_garbage() -> None:
    with pytest.raises(ImageLoadError):
        decode_rgba(b"definitely not an image")


@pytest.mark.asyncio
async def test_load_reads_local_file(write_png: Callable[..., Path]) -> None:
    path = write_png(Image.new("RGBA", (4, 4), (1, 2, 3, 4)))

    async with ImageLoader(Settings()) as loader:
        image = await loader.load(str(path))

    assert image.data[:4] == bytes((1, 2, 3, 4))


@pytest.mark.asyncio
async def test_load_decodes_data_url(png_data_url: Callable[[Image.Image], str]) -> None:
    async with ImageLoader(Settings()) as loader:
        image = await loader.load(png_data_url(Image.new("RGB", (2, 2), (90, 80, 70))))

    assert image.pixel_count == 4
    assert image.data[:3] == bytes((90, 80, 70))


@pytest.mark.asyncio
async def test_load_rejects_non_base64_data_url() -> None:
    async with ImageLoader(Settings()) as loader:
        with pytest.raises(ImageLoadError):
            await loader.load("data:image/svg+xml,<svg></svg>")


@pytest.mark.asyncio
async def test_load_fetches_http_url(png_bytes: Callable[[Image.Image], bytes]) -> None:
    png = png_bytes(Image.new("RGB", (5, 5), (100, 0, 50)))
    async with httpx.AsyncClient(transport=_transport(png)) as client:
        loader = ImageLoader(Settings(), client=client)
        image = await loader.load("https://cdn.test/ok.png")

    assert image.pixel_count == 25
    assert image.data[:3] == bytes((100, 0, 50))


@pytest.mark.asyncio
async def test_load_wraps_http_errors(png_bytes: Callable[[Image.Image], bytes]) -> None:
    png = png_bytes(Image.new("RGB", (1, 1)))
    async with httpx.AsyncClient(transport=_transport(png)) as client:
        loader = ImageLoader(Settings(), client=client)
        with pytest.raises(ImageLoadError) as excinfo:
            await loader.load("https://cdn.test/missing.png")

    assert "404" in str(excinfo.value)
    assert excinfo.value.image_ref == "https://cdn.test/missing.png"
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_load_enforces_size_limit(write_png: Callable[..., Path]) -> None:
    path = write_png(Image.new("RGB", (32, 32), (10, 200, 10)))

    async with ImageLoader(Settings(image_max_bytes=10)) as loader:
        with pytest.raises(ImageLoadError, match="exceeds 10 bytes"):
            await loader.load(str(path))


@pytest.mark.asyncio
async def test_load_stops_reading_oversized_streamed_body() -> None:
    consumed: list[int] = []

    async def _body():
        for _ in range(100):
            consumed.append(1024)
            yield b"\x00" * 1024

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_body())

    async with httpx.AsyncClient(transport=httpx.MockTransport(_handler)) as client:
        loader = ImageLoader(Settings(image_max_bytes=1024), client=client)
        with pytest.raises(ImageLoadError, match="exceeds 1024 bytes"):
            await loader.load("https://cdn.test/huge.png")

    assert sum(consumed) <= 2048


@pytest.mark.asyncio
async def test_load_rejects_large_content_length_up_front() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\x00" * 5000)

    async with httpx.AsyncClient(transport=httpx.MockTransport(_handler)) as client:
        loader = ImageLoader(Settings(image_max_bytes=1024), client=client)
        with pytest.raises(ImageLoadError, match="got 5000"):
            await loader.load("https://cdn.test/big.png")


@pytest.mark.asyncio
async def test_load_refuses_paths_when_local_files_disabled(write_png: Callable[..., Path]) -> None:
    path = write_png(Image.new("RGB", (4, 4), (200, 30, 30)))

    async with ImageLoader(Settings(), allow_local_files=False) as loader:
        with pytest.raises(ImageLoadError, match="http"):
            await loader.load(str(path))
