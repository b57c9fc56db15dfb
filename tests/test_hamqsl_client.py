import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from solar_canvas.clients.hamqsl_client import fetch_solar_xml, make_fetcher
from solar_canvas.core.parser import parse_solar_xml

LATIN1_FEED = (
    '<?xml version="1.0" encoding="ISO-8859-1"?>'
    "<solar><solardata><source>Observatório</source><solarflux>120</solarflux></solardata></solar>"
).encode("latin-1")


def serve_and_fetch(handler):
    async def run():
        app = web.Application()
        app.router.add_get("/solarxml.php", handler)
        async with test_utils.TestServer(app) as server:
            return await fetch_solar_xml(str(server.make_url("/solarxml.php")), timeout=5)

    return asyncio.run(run())


def test_fetch_returns_undecoded_body():
    async def handler(request):
        return web.Response(body=LATIN1_FEED, content_type="text/xml")

    raw = serve_and_fetch(handler)

    assert raw == LATIN1_FEED
    record = parse_solar_xml(raw)
    assert record.source == "Observatório"
    assert record.solarflux == 120


def test_fetch_raises_on_http_error():
    async def handler(request):
        return web.Response(status=503, text="maintenance")

    with pytest.raises(aiohttp.ClientResponseError):
        serve_and_fetch(handler)


def test_make_fetcher_binds_url():
    async def handler(request):
        return web.Response(body=LATIN1_FEED, content_type="text/xml")

    async def run():
        app = web.Application()
        app.router.add_get("/solarxml.php", handler)
        async with test_utils.TestServer(app) as server:
            fetcher = make_fetcher(str(server.make_url("/solarxml.php")), timeout=5)
            return await fetcher()

    assert asyncio.run(run()) == LATIN1_FEED
