"""Turn image references (URLs, data URLs, paths) into RGBA pixel buffers."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

import httpx
from PIL import Image, UnidentifiedImageError

from dyntheme.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ImageLoadError(RuntimeError):
    """Raised when an image cannot be fetched or decoded."""

    def __init__(self, message: str, image_ref: str | None = None) -> None:
        self.image_ref = image_ref
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class RgbaImage:
    """Decoded image as tightly packed RGBA bytes, row-major."""

    width: int
    height: int
    data: bytes

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def decode_rgba(payload: bytes) -> RgbaImage:
    """Decode encoded image bytes with Pillow and convert to RGBA."""

    try:
        with Image.open(BytesIO(payload)) as img:
            rgba = img.convert("RGBA")
            return RgbaImage(width=rgba.width, height=rgba.height, data=rgba.tobytes())
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(f"Unsupported or corrupt image data: {exc}") from exc


class ImageLoader:
    """Fetches image bytes over HTTP, from data URLs or from disk.

    Disk paths are refused when ``allow_local_files`` is off, which is how
    the HTTP API runs.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        *,
        allow_local_files: bool = True,
    ) -> None:
        self._settings = settings or get_settings()
        self._allow_local_files = allow_local_files
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.image_fetch_timeout,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "ImageLoader":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client if this loader created it."""

        if self._owns_client:
            await self._client.aclose()

    async def load(self, image_ref: str) -> RgbaImage:
        """Return the decoded RGBA buffer for ``image_ref``."""

        try:
            payload = await self._read_bytes(image_ref)
        except ImageLoadError as exc:
            exc.image_ref = image_ref
            raise
        if len(payload) > self._settings.image_max_bytes:
            raise ImageLoadError(
                f"Image is {len(payload)} bytes, limit is {self._settings.image_max_bytes}.",
                image_ref=image_ref,
            )
        try:
            return await asyncio.to_thread(decode_rgba, payload)
        except ImageLoadError as exc:
            exc.image_ref = image_ref
            raise

    async def _read_bytes(self, image_ref: str) -> bytes:
        if image_ref.startswith(("http://", "https://")):
            return await self._fetch(image_ref)
        if image_ref.startswith("data:"):
            return self._decode_data_url(image_ref)
        if not self._allow_local_files:
            raise ImageLoadError("Only http(s) and data: image references are accepted.")
        return await self._read_file(Path(image_ref).expanduser())

    def _too_large(self, size: int) -> ImageLoadError:
        return ImageLoadError(f"Image exceeds {self._settings.image_max_bytes} bytes (got {size}).")

    async def _fetch(self, url: str) -> bytes:
        limit = self._settings.image_max_bytes
        chunks: list[bytes] = []
        received = 0
        try:
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()
                declared = response.headers.get("content-length", "")
                if declared.isdigit() and int(declared) > limit:
                    raise self._too_large(int(declared))
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if received > limit:
                        raise self._too_large(received)
                    chunks.append(chunk)
        except httpx.TimeoutException as exc:
            raise ImageLoadError(f"Timed out fetching {url}.") from exc
        except httpx.HTTPStatusError as exc:
            raise ImageLoadError(f"Image server returned {exc.response.status_code} for {url}.") from exc
        except httpx.HTTPError as exc:
            raise ImageLoadError(f"Could not fetch {url}: {exc}") from exc
        logger.debug("Fetched %s (%d bytes)", url, received)
        return b"".join(chunks)

    @staticmethod
    def _decode_data_url(data_url: str) -> bytes:
        header, sep, encoded = data_url.partition(",")
        if not sep or not header.endswith(";base64"):
            raise ImageLoadError("Only base64 data URLs are supported.")
        try:
            return base64.b64decode(encoded, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ImageLoadError("Data URL is not valid base64.") from exc

    async def _read_file(self, path: Path) -> bytes:
        try:
            size = (await asyncio.to_thread(path.stat)).st_size
            if size > self._settings.image_max_bytes:
                raise self._too_large(size)
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise ImageLoadError(f"Cannot read image file {path}: {exc}") from exc
