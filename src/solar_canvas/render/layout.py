"""
Layout engine for the solar canvas.

All geometry below is expressed in baseline pixels for a 480 px high canvas.
At draw time every coordinate, font size and padding is multiplied by
height / 480 and rounded half-up, so the same layout works on any panel.
Anchors that depend on the canvas width (separator ends, the VHF and misc
columns) add the scaled offset to the pixel width term.

Text y coordinates are baselines.
"""

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Optional, Tuple

from solar_canvas.core.errors import RenderFailure
from solar_canvas.core.models import NA, CanonicalSolarRecord, RenderConfig
from solar_canvas.render.surface import DrawingSurface, FontBook, PillowSurface
from solar_canvas.render.theme import (
    Condition,
    Palette,
    classify_condition,
    condition_color,
    condition_highlight,
    metric_highlight,
    select_palette,
)

logger = logging.getLogger(__name__)

BASE_HEIGHT = 480

FONT_SMALL = 20
FONT_NORMAL = 22
FONT_LARGE = 22
LINE_SPACING = 30
PADDING = 20
SEPARATOR_WIDTH = 2

# Highlight box around boxed text: HIGHLIGHT_PAD on each side, fixed height.
HIGHLIGHT_PAD = 4
HIGHLIGHT_HEIGHT = 27

TITLE = "Solar Terrestrial Data"
TITLE_Y = 40
SUBTITLE_Y = 70
TOP_SEPARATOR_Y = 85

# Metric grid
GRID_COLUMNS = (PADDING, 210, 500)
GRID_FIRST_ROW_Y = 125
GRID_BOX_TOP_OFFSET = 21  # box top = row baseline - 21
GRID_SEPARATOR_Y = 240

# HF band table
HF_TITLE_Y = 285
HF_HEADER_Y = 315
HF_FIRST_ROW_Y = 345
HF_ROW_SPACING = 35
HF_DAY_HEADER_X = 112
HF_NIGHT_HEADER_X = 170
HF_DAY_RIGHT = 156
HF_NIGHT_RIGHT = 218
HF_BOX_TOP_OFFSET = 20

# VHF / EME list, x relative to width / 2
VHF_X_FROM_CENTER = -100
VHF_TITLE_Y = 285
VHF_FIRST_ROW_Y = 315
VHF_ROW_SPACING = 34
VHF_VALUE_OFFSET = 90
VHF_ROWS = (
    ("Aurora:", "vhf-aurora", "northern_hemi"),
    ("6m EsEU:", "E-Skip", "europe_6m"),
    ("4m EsEU:", "E-Skip", "europe_4m"),
    ("2m EsEU:", "E-Skip", "europe"),
    ("2m EsNA:", "E-Skip", "north_america"),
)

# Misc column, x relative to width / 2
MISC_X_FROM_CENTER = 160
MISC_FIRST_ROW_Y = 315
MISC_ROW_SPACING = 33


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class Scale:
    """Baseline pixels -> output pixels for a given canvas height."""

    def __init__(self, height: int) -> None:
        self.factor = height / BASE_HEIGHT

    def __call__(self, value: float) -> int:
        return round_half_up(value * self.factor)

    def from_center(self, width: int, offset: float) -> int:
        return round_half_up(width / 2 + offset * self.factor)


def display_value(value) -> str:
    """Render a record value the way it should read on the panel (2.0 -> '2')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_timestamp(now: datetime) -> str:
    """'Oct 18, 2026, 3:04:05 PM UTC'"""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    hour = now.hour % 12 or 12
    meridiem = "AM" if now.hour < 12 else "PM"
    return f"{now:%b} {now.day}, {now.year}, {hour}:{now:%M:%S} {meridiem} UTC"


class CanvasLayout:
    """Draws one CanonicalSolarRecord onto a surface for one RenderConfig.

    Instances are built per render and hold no state beyond that render.
    """

    def __init__(self, surface: DrawingSurface, record: CanonicalSolarRecord, config: RenderConfig) -> None:
        self.surface = surface
        self.record = record
        self.config = config
        self.palette: Palette = select_palette(config)
        self.px = Scale(config.height)

    def draw(self, now: datetime) -> None:
        self.surface.fill_rect(0, 0, self.config.width, self.config.height, self.palette.background)
        self.draw_header(now)
        self.draw_metric_grid()
        self.draw_hf_conditions()
        self.draw_vhf_conditions()
        self.draw_misc_column()

    # ---------------------------
    # Primitives
    # ---------------------------
    def set_font(self, size: int) -> None:
        # tiny canvases still need a drawable font
        self.surface.set_font(max(1, self.px(size)), bold=True)

    def separator(self, y: int) -> None:
        px = self.px
        self.surface.line(
            px(PADDING), px(y), self.config.width - px(PADDING), px(y),
            self.palette.separator, px(SEPARATOR_WIDTH),
        )

    def boxed_text(self, text: str, x: int, y: int, box_top: int, colors: Tuple[str, str]) -> None:
        """Text at (x, baseline y) over a filled box; x, y, box_top already scaled."""
        fill, ink = colors
        px = self.px
        width = self.surface.measure_text(text)
        self.surface.fill_rect(
            x - px(HIGHLIGHT_PAD),
            box_top,
            round_half_up(width) + 2 * px(HIGHLIGHT_PAD),
            px(HIGHLIGHT_HEIGHT),
            fill,
        )
        self.surface.fill_text(text, x, y, ink)

    # ---------------------------
    # Regions
    # ---------------------------
    def draw_header(self, now: datetime) -> None:
        px = self.px
        self.set_font(FONT_LARGE)
        self.surface.fill_text(TITLE, px(PADDING), px(TITLE_Y), self.palette.title)

        self.set_font(FONT_SMALL)
        self.surface.fill_text(format_timestamp(now), px(PADDING), px(SUBTITLE_Y), self.palette.subtitle)

        self.separator(TOP_SEPARATOR_Y)

    def draw_metric_grid(self) -> None:
        px = self.px
        rec = self.record
        col1, col2, col3 = GRID_COLUMNS
        self.set_font(FONT_NORMAL)

        # Row 1 values are boxed; offsets are relative to the column start.
        y = GRID_FIRST_ROW_Y
        highlight = metric_highlight(self.palette, self.config)
        for label, value, x, offset in (
            ("SFI:", rec.solarflux, col1, 50),
            ("Sunspots:", rec.sunspots, col2, 110),
            ("S/N Ratio:", rec.signalnoise, col3, 120),
        ):
            self.surface.fill_text(label, px(x), px(y), self.palette.subtitle)
            self.boxed_text(display_value(value), px(x + offset), px(y), px(y - GRID_BOX_TOP_OFFSET), highlight)

        rows = (
            (
                ("K Index:", display_value(rec.kindex), col1, 90),
                ("Solar Wind:", f"{display_value(rec.solarwind)} km/s", col2, 130),
                ("X-Ray:", display_value(rec.xray), col3, 70),
            ),
            (
                ("Aurora:", display_value(rec.aurora), col1, 80),
                ("Proton Flux:", display_value(rec.protonflux), col2, 140),
                ("Helium Line:", display_value(rec.heliumline), col3, 140),
            ),
            (
                ("Mag Fld:", display_value(rec.magneticfield), col1, 90),
                ("Geo Fld:", display_value(rec.geomagfield), col2, 90),
                ("Lat Deg:", display_value(rec.latdegree), col3, 90),
            ),
        )
        for row in rows:
            y += LINE_SPACING
            for label, value, x, offset in row:
                self.surface.fill_text(label, px(x), px(y), self.palette.subtitle)
                self.surface.fill_text(value, px(x + offset), px(y), self.palette.text)

        self.separator(GRID_SEPARATOR_Y)

    def draw_condition_cell(self, condition: str, right: int, y: int) -> None:
        """Right-align condition so it ends at `right` (baseline px); box it when good."""
        px = self.px
        width = self.surface.measure_text(condition)
        x = round_half_up(px(right) - width)

        if classify_condition(condition) is Condition.GOOD:
            self.boxed_text(condition, x, px(y), px(y - HF_BOX_TOP_OFFSET),
                            condition_highlight(self.palette, self.config))
        else:
            self.surface.fill_text(condition, x, px(y), condition_color(condition, self.palette, self.config))

    def draw_hf_conditions(self) -> None:
        px = self.px
        self.set_font(FONT_LARGE)
        self.surface.fill_text("HF Band Conditions", px(PADDING), px(HF_TITLE_Y), self.palette.title)

        self.set_font(FONT_NORMAL)
        self.surface.fill_text("Band:", px(PADDING), px(HF_HEADER_Y), self.palette.subtitle)
        self.surface.fill_text("Day", px(HF_DAY_HEADER_X), px(HF_HEADER_Y), self.palette.subtitle)
        self.surface.fill_text("Night", px(HF_NIGHT_HEADER_X), px(HF_HEADER_Y), self.palette.subtitle)

        y = HF_FIRST_ROW_Y
        for band, periods in self.record.calculatedconditions.items():
            self.surface.fill_text(f"{band}:", px(PADDING), px(y), self.palette.subtitle)
            self.draw_condition_cell(periods.get("day", NA), HF_DAY_RIGHT, y)
            self.draw_condition_cell(periods.get("night", NA), HF_NIGHT_RIGHT, y)
            y += HF_ROW_SPACING

    def draw_vhf_conditions(self) -> None:
        px = self.px
        x = px.from_center(self.config.width, VHF_X_FROM_CENTER)
        self.set_font(FONT_LARGE)
        self.surface.fill_text("VHF / EME Conditions", x, px(VHF_TITLE_Y), self.palette.title)

        self.set_font(FONT_NORMAL)
        vhf = self.record.calculatedvhfconditions
        y = VHF_FIRST_ROW_Y
        for label, phenomenon, location in VHF_ROWS:
            value = (vhf.get(phenomenon, {}).get(location) or NA).strip() or NA
            self.surface.fill_text(label, x, px(y), self.palette.subtitle)
            self.surface.fill_text(value, x + px(VHF_VALUE_OFFSET), px(y),
                                   condition_color(value, self.palette, self.config))
            y += VHF_ROW_SPACING

    def draw_misc_column(self) -> None:
        px = self.px
        rec = self.record
        start_x = px.from_center(self.config.width, MISC_X_FROM_CENTER)
        self.set_font(FONT_NORMAL)

        y = MISC_FIRST_ROW_Y
        for label, value in (
            ("MUF: ", rec.muf),
            ("Norm: ", rec.normalization),
            ("A Index: ", rec.aindex),
            ("Elec Flux: ", rec.electonflux),
        ):
            x = float(start_x)
            x = self.draw_segment(label, self.palette.subtitle, x, px(y))
            self.draw_segment(display_value(value), self.palette.text, x, px(y))
            y += MISC_ROW_SPACING

    def draw_segment(self, text: str, color: str, x: float, y: int) -> float:
        """Draw text at x and return where the next segment starts."""
        self.surface.fill_text(text, round_half_up(x), y, color)
        return x + self.surface.measure_text(text)


def draw_solar_canvas(
    surface: DrawingSurface,
    record: CanonicalSolarRecord,
    config: RenderConfig,
    now: Optional[datetime] = None,
) -> None:
    """Issue every drawing command for record onto surface."""
    CanvasLayout(surface, record, config).draw(now or datetime.now(timezone.utc))


def _draw(record: CanonicalSolarRecord, config: RenderConfig, fonts: FontBook,
          now: Optional[datetime]) -> PillowSurface:
    palette = select_palette(config)
    try:
        surface = PillowSurface(config.width, config.height, fonts, background=palette.background)
        draw_solar_canvas(surface, record, config, now)
    except Exception as e:
        raise RenderFailure(f"Drawing the solar canvas failed: {e!r}") from e
    return surface


def _encode(surface: PillowSurface) -> bytes:
    try:
        return surface.to_png()
    except Exception as e:
        raise RenderFailure(f"PNG encoding failed: {e!r}") from e


def render_png(record: CanonicalSolarRecord, config: RenderConfig, fonts: FontBook,
               now: Optional[datetime] = None) -> bytes:
    """Render record to PNG bytes of config.width x config.height."""
    return _encode(_draw(record, config, fonts, now))


async def render_png_async(record: CanonicalSolarRecord, config: RenderConfig, fonts: FontBook,
                           now: Optional[datetime] = None) -> bytes:
    """Like render_png, but PNG encoding runs in the default thread pool."""
    surface = _draw(record, config, fonts, now)
    png = await asyncio.to_thread(_encode, surface)
    logger.debug("Rendered %dx%d PNG (%d bytes)", config.width, config.height, len(png))
    return png
