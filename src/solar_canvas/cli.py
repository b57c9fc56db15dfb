"""
cli.py

Usage:
    solar-canvas serve                               # run the HTTP server
    solar-canvas render --out solar.png              # fetch the live feed and write a PNG
    solar-canvas render --xml sample.xml --invert 1 --height 960 --width 1600
    solar-canvas json --xml sample.xml               # print the canonical record
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import aiohttp

from solar_canvas.clients.hamqsl_client import fetch_solar_xml
from solar_canvas.config import Settings, configure_logging, load_settings
from solar_canvas.core.errors import SolarCanvasError, UpstreamUnavailable
from solar_canvas.core.models import CanonicalSolarRecord, RenderConfig
from solar_canvas.core.parser import parse_solar_xml
from solar_canvas.render.layout import render_png
from solar_canvas.render.surface import FontBook


def load_record(args: argparse.Namespace, settings: Settings) -> CanonicalSolarRecord:
    if args.xml:
        raw = Path(args.xml).read_bytes()
    else:
        try:
            raw = asyncio.run(fetch_solar_xml(settings.feed_url, timeout=settings.fetch_timeout_seconds))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamUnavailable(f"Could not fetch {settings.feed_url}: {e!r}") from e
    return parse_solar_xml(raw)


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from solar_canvas.api.server import create_app

    uvicorn.run(create_app(settings), host=args.host or settings.host, port=args.port or settings.port)
    return 0


def cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    record = load_record(args, settings)
    config = RenderConfig(
        mode=args.mode,
        invert=args.invert,
        black_and_white=args.black_and_white,
        width=args.width or settings.default_width,
        height=args.height or settings.default_height,
    )
    png = render_png(record, config, FontBook(settings.resolved_font_path()))
    Path(args.out).write_bytes(png)
    print(f"Wrote {config.width}x{config.height} PNG to {args.out}")
    return 0


def cmd_json(args: argparse.Namespace, settings: Settings) -> int:
    record = load_record(args, settings)
    print(json.dumps(record.model_dump(), indent=2))
    return 0


def parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="solar-canvas", description="Solar-terrestrial data for e-ink panels")
    parser.add_argument("--config", help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host")
    serve.add_argument("--port", type=int)
    serve.set_defaults(func=cmd_serve)

    render = sub.add_parser("render", help="Render the canvas to a PNG file")
    render.add_argument("--xml", help="Read the feed from a local XML file instead of fetching it")
    render.add_argument("--out", default="solar.png")
    render.add_argument("--mode", type=int, choices=(0, 1), default=1)
    render.add_argument("--invert", type=int, choices=(0, 1), default=0)
    render.add_argument("--black-and-white", action="store_true")
    render.add_argument("--width", type=int)
    render.add_argument("--height", type=int)
    render.set_defaults(func=cmd_render)

    dump = sub.add_parser("json", help="Print the canonical record as JSON")
    dump.add_argument("--xml", help="Read the feed from a local XML file instead of fetching it")
    dump.set_defaults(func=cmd_json)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args.config)
    configure_logging(settings.log_level)
    try:
        return args.func(args, settings)
    except SolarCanvasError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
