"""
Drawing surfaces for the layout engine.

The layout engine only talks to the DrawingSurface protocol: select a font,
measure, fill text/rects, stroke lines. PillowSurface backs it with a Pillow
image and produces PNG bytes.
"""

import io
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


class DrawingSurface(Protocol):
    width: int
    height: int

    def set_font(self, size: int, bold: bool = False) -> None: ...

    def measure_text(self, text: str) -> float: ...

    def fill_text(self, text: str, x: float, y: float, color: str) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: int) -> None: ...


class FontBook:
    """TrueType fonts by pixel size, loaded once per size.

    Falls back to Pillow's bundled scalable font when the configured file
    cannot be loaded; the warning is logged once.
    """

    def __init__(self, font_path: Optional[Union[str, Path]] = None) -> None:
        self.font_path = Path(font_path) if font_path else None
        self._fonts: Dict[int, ImageFont.FreeTypeFont] = {}
        self._fallback = self.font_path is None

    def get(self, size: int):
        font = self._fonts.get(size)
        if font is None:
            font = self._load(size)
            self._fonts[size] = font
        return font

    def _load(self, size: int):
        if not self._fallback:
            try:
                return ImageFont.truetype(str(self.font_path), size)
            except OSError as e:
                logger.warning("Could not load font %s (%s). Falling back to the default font.", self.font_path, e)
                self._fallback = True
        return ImageFont.load_default(size=size)


class PillowSurface:
    """DrawingSurface over an RGB Pillow image.

    Text is anchored at the left end of its alphabetic baseline, so y is the
    baseline like a browser canvas fillText.
    """

    def __init__(self, width: int, height: int, fonts: FontBook, background: str = "#000000") -> None:
        self.width = width
        self.height = height
        self.fonts = fonts
        self.image = Image.new("RGB", (width, height), background)
        self.draw = ImageDraw.Draw(self.image)
        self._font = None

    def set_font(self, size: int, bold: bool = False) -> None:
        # the configured face is already bold; weight only matters to other surfaces
        self._font = self.fonts.get(size)

    def _current_font(self):
        if self._font is None:
            raise RuntimeError("set_font() must be called before drawing or measuring text")
        return self._font

    def measure_text(self, text: str) -> float:
        return self.draw.textlength(text, font=self._current_font())

    def fill_text(self, text: str, x: float, y: float, color: str) -> None:
        self.draw.text((x, y), text, fill=color, font=self._current_font(), anchor="ls")

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        if w <= 0 or h <= 0:
            return
        self.draw.rectangle([x, y, x + w - 1, y + h - 1], fill=color)

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: int) -> None:
        self.draw.line([(x1, y1), (x2, y2)], fill=color, width=max(1, width))

    def to_png(self) -> bytes:
        buf = io.BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()
