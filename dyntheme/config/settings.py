"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    image_fetch_timeout: float = 10.0
    image_max_bytes: int = 20 * 1024 * 1024

    palette_sample_stride: int = 10
    palette_bucket_size: int = 10
    palette_top_colors: int = 5

    default_theme: str = "dark"


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        image_fetch_timeout=float(os.getenv("IMAGE_FETCH_TIMEOUT", "10")),
        image_max_bytes=int(os.getenv("IMAGE_MAX_BYTES", str(20 * 1024 * 1024))),
        palette_sample_stride=int(os.getenv("PALETTE_SAMPLE_STRIDE", "10")),
        palette_bucket_size=int(os.getenv("PALETTE_BUCKET_SIZE", "10")),
        palette_top_colors=int(os.getenv("PALETTE_TOP_COLORS", "5")),
        default_theme=os.getenv("DEFAULT_THEME", "dark"),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
