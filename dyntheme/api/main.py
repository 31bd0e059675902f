"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Cookie, Depends, FastAPI, Query, Request, Response
from pydantic import BaseModel, ConfigDict, Field

from dyntheme.config.settings import get_settings
from dyntheme.imgproc.color_extract import PaletteExtractor
from dyntheme.imgproc.loader import ImageLoader
from dyntheme.theme.controller import ThemeController
from dyntheme.theme.palette import ColorPalette, neutral_palette
from dyntheme.theme.preference import (
    THEME_COOKIE_MAX_AGE,
    THEME_COOKIE_NAME,
    ThemePreference,
    ThemePreferenceStore,
    preference_from_cookie,
)


class PaletteResponse(BaseModel):
    """Palette as consumed by the frontend."""

    model_config = ConfigDict(populate_by_name=True)

    primary: str
    secondary: str
    background: str
    surface: str
    text: str
    text_secondary: str = Field(alias="textSecondary")
    accent: str
    is_dark: bool = Field(alias="isDark")

    @classmethod
    def from_palette(cls, palette: ColorPalette) -> "PaletteResponse":
        return cls.model_validate(palette.to_dict())


class ThemeToggleResponse(BaseModel):
    """New preference together with its neutral palette."""

    theme: ThemePreference
    palette: PaletteResponse


def get_extractor(request: Request) -> PaletteExtractor:
    return request.app.state.extractor


def get_preference(theme: str | None = Cookie(default=None)) -> ThemePreference:
    parsed = preference_from_cookie(theme)
    if parsed is not None:
        return parsed
    return preference_from_cookie(get_settings().default_theme) or ThemePreference.DARK


def create_app() -> FastAPI:
    """Initialise the FastAPI application."""

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        loader = ImageLoader(settings, allow_local_files=False)
        app.state.extractor = PaletteExtractor(loader=loader, settings=settings)
        try:
            yield
        finally:
            await app.state.extractor.close()

    app = FastAPI(
        title="Dynamic Theme API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/palette", tags=["theme"], response_model=PaletteResponse)
    async def palette_for_image(
        image: str = Query(..., min_length=1, description="http(s) image URL or base64 data URL."),
        preference: ThemePreference = Depends(get_preference),
        extractor: PaletteExtractor = Depends(get_extractor),
    ) -> PaletteResponse:
        """Extract a palette from ``image`` and reconcile it with the theme cookie."""

        controller = ThemeController(extractor, ThemePreferenceStore(preference))
        try:
            palette = await controller.update_palette(image)
        finally:
            controller.close()
        return PaletteResponse.from_palette(palette)

    @app.get("/palette/neutral", tags=["theme"], response_model=PaletteResponse)
    async def neutral_palette_for_theme(
        preference: ThemePreference = Depends(get_preference),
    ) -> PaletteResponse:
        """Palette shown before any image has been analysed."""

        return PaletteResponse.from_palette(neutral_palette(preference))

    @app.post("/theme/toggle", tags=["theme"], response_model=ThemeToggleResponse)
    async def toggle_theme(
        response: Response,
        preference: ThemePreference = Depends(get_preference),
    ) -> ThemeToggleResponse:
        """Flip the theme cookie and return the matching neutral palette."""

        store = ThemePreferenceStore(preference)
        new_preference = store.toggle()
        response.set_cookie(
            THEME_COOKIE_NAME,
            new_preference.value,
            max_age=THEME_COOKIE_MAX_AGE,
            path="/",
        )
        return ThemeToggleResponse(
            theme=new_preference,
            palette=PaletteResponse.from_palette(neutral_palette(new_preference)),
        )

    return app


app = create_app()
