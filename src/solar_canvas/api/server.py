"""
FastAPI server exposing the solar feed as JSON, an HTML page and a PNG.
This file wires:
- FeedCache (shared, stale-while-error copy of the upstream XML)
- the feed parser (XML -> CanonicalSolarRecord)
- the layout engine (record + per-request RenderConfig -> PNG)
"""

import base64
import logging
from typing import Awaitable, Callable, Mapping, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response

from solar_canvas.cache.feed_cache import FeedCache, RawPayload
from solar_canvas.clients.hamqsl_client import make_fetcher
from solar_canvas.config import Settings, load_settings
from solar_canvas.core.errors import SolarCanvasError
from solar_canvas.core.models import CanonicalSolarRecord, RenderConfig
from solar_canvas.core.parser import parse_solar_xml
from solar_canvas.render.layout import render_png_async
from solar_canvas.render.surface import FontBook

logger = logging.getLogger(__name__)

router = APIRouter()

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Solar Terrestrial Data</title>
    <style>
        body {{ background-color: #282c34; color: #ffffff; font-family: {font_family}, monospace; display: flex; justify-content: center; align-items: center; height: 100vh; margin: 0; }}
        img {{ border: 2px solid #ffffff; }}
    </style>
</head>
<body>
    <img src="data:image/png;base64,{image}" alt="Solar Terrestrial Data Canvas">
</body>
</html>
"""


# --- Query parsing ---
def _flag(value: Optional[str], default: int) -> int:
    return int(value) if value in ("0", "1") else default


def _dimension(value: Optional[str], default: int, limit: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    if n <= 0:
        return default
    return min(n, limit)


def build_render_config(params: Mapping[str, str], settings: Settings) -> RenderConfig:
    """Per-request RenderConfig from query parameters; bad values fall back to defaults."""
    return RenderConfig(
        mode=_flag(params.get("mode"), 1),
        invert=_flag(params.get("invert"), 0),
        black_and_white=params.get("blackAndWhite") == "1" or params.get("bw_mode") == "1",
        width=_dimension(params.get("width"), settings.default_width, settings.max_dimension),
        height=_dimension(params.get("height"), settings.default_height, settings.max_dimension),
    )


async def load_record(request: Request) -> CanonicalSolarRecord:
    cache: FeedCache = request.app.state.feed_cache
    payload = await cache.get_payload()
    return parse_solar_xml(payload)


async def render_request(request: Request) -> bytes:
    record = await load_record(request)
    config = build_render_config(request.query_params, request.app.state.settings)
    return await render_png_async(record, config, request.app.state.fonts)


# --- Endpoints ---
@router.get("/solar/json")
async def solar_json(request: Request):
    """Return the canonical record; missing values are the string "N/A"."""
    try:
        record = await load_record(request)
    except SolarCanvasError:
        logger.exception("Failed to retrieve or parse solar data")
        return JSONResponse(status_code=500, content={"error": "Failed to retrieve or parse solar data"})
    return JSONResponse(content=record.model_dump())


@router.get("/solar/canvas", response_class=HTMLResponse)
async def solar_canvas(request: Request):
    """Return an HTML page with the rendered canvas inlined as a data URI."""
    try:
        png = await render_request(request)
    except SolarCanvasError:
        logger.exception("Error generating canvas")
        return PlainTextResponse("Error generating solar data canvas.", status_code=500)

    html = HTML_TEMPLATE.format(
        font_family=request.app.state.settings.font_family,
        image=base64.b64encode(png).decode("ascii"),
    )
    return HTMLResponse(content=html)


@router.get("/solar/png")
async def solar_png(request: Request):
    """Return the rendered canvas as image/png."""
    try:
        png = await render_request(request)
    except SolarCanvasError:
        logger.exception("Error generating PNG")
        return PlainTextResponse("Error generating solar data PNG.", status_code=500)
    return Response(content=png, media_type="image/png")


@router.get("/")
async def index():
    return RedirectResponse(url="/solar/canvas", status_code=302)


@router.get("/health")
async def health():
    return {"status": "ok"}


def create_app(
    settings: Optional[Settings] = None,
    fetcher: Optional[Callable[[], Awaitable[RawPayload]]] = None,
    feed_cache: Optional[FeedCache] = None,
) -> FastAPI:
    """Build the FastAPI app. fetcher/feed_cache are injectable for tests."""
    settings = settings or load_settings()

    app = FastAPI(title="Solar Canvas", version="0.1.0")
    app.state.settings = settings
    app.state.feed_cache = feed_cache or FeedCache(
        fetcher or make_fetcher(settings.feed_url, timeout=settings.fetch_timeout_seconds),
        refresh_interval=settings.refresh_interval_seconds,
    )
    app.state.fonts = FontBook(settings.resolved_font_path())
    app.include_router(router)
    return app
