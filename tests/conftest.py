import textwrap
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from solar_canvas.config import Settings


SAMPLE_XML = textwrap.dedent(
    """
    <?xml version="1.0" encoding="UTF-8"?>
    <solar>
      <solardata>
        <source url="http://www.hamqsl.com/solar.html">N0NBH</source>
        <updated> 18 Oct 2026 1200 GMT</updated>
        <solarflux>120</solarflux>
        <aindex>7</aindex>
        <kindex>2</kindex>
        <kindexnt>No Report</kindexnt>
        <xray>B4.2</xray>
        <sunspots>45</sunspots>
        <heliumline>131.4</heliumline>
        <protonflux>112</protonflux>
        <electonflux>1480</electonflux>
        <aurora>1</aurora>
        <normalization>0.99</normalization>
        <latdegree>67.5</latdegree>
        <solarwind>425.0</solarwind>
        <magneticfield>-1.6</magneticfield>
        <calculatedconditions>
          <band name="80m-40m" time="day">Good</band>
          <band name="30m-20m" time="day">Fair</band>
          <band name="17m-15m" time="day">Poor</band>
          <band name="12m-10m" time="day">Poor</band>
          <band name="80m-40m" time="night">Fair</band>
          <band name="30m-20m" time="night">Good</band>
          <band name="17m-15m" time="night">Poor</band>
          <band name="12m-10m" time="night">Poor</band>
        </calculatedconditions>
        <calculatedvhfconditions>
          <phenomenon name="vhf-aurora" location="northern_hemi">Band Closed</phenomenon>
          <phenomenon name="E-Skip" location="europe">Band Closed</phenomenon>
          <phenomenon name="E-Skip" location="north_america">Band Closed</phenomenon>
          <phenomenon name="E-Skip" location="europe_6m">50MHz ES</phenomenon>
          <phenomenon name="E-Skip" location="europe_4m">Band Closed</phenomenon>
        </calculatedvhfconditions>
        <geomagfield>QUIET</geomagfield>
        <signalnoise>S1-S2</signalnoise>
        <fof2>5.15</fof2>
        <muffactor>NoRpt</muffactor>
        <muf>NoRpt</muf>
      </solardata>
    </solar>
    """
).strip()

FIXED_NOW = datetime(2026, 10, 18, 15, 4, 5, tzinfo=timezone.utc)


@dataclass
class TextOp:
    text: str
    x: float
    y: float
    color: str
    size: int


@dataclass
class RectOp:
    x: float
    y: float
    w: float
    h: float
    color: str


@dataclass
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: int


class RecordingSurface:
    """DrawingSurface that records every command.

    Every glyph is half the font size wide, so measured widths are exact.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.ops: List[object] = []
        self.font_size: Optional[int] = None

    def set_font(self, size: int, bold: bool = False) -> None:
        self.font_size = size

    def measure_text(self, text: str) -> float:
        assert self.font_size is not None, "measured before a font was selected"
        return len(text) * self.font_size * 0.5

    def fill_text(self, text: str, x: float, y: float, color: str) -> None:
        self.ops.append(TextOp(text, x, y, color, self.font_size))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        self.ops.append(RectOp(x, y, w, h, color))

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: int) -> None:
        self.ops.append(LineOp(x1, y1, x2, y2, color, width))

    def texts(self) -> List[TextOp]:
        return [op for op in self.ops if isinstance(op, TextOp)]

    def rects(self) -> List[RectOp]:
        return [op for op in self.ops if isinstance(op, RectOp)]

    def find_text(self, text: str, y: Optional[float] = None) -> TextOp:
        for op in self.texts():
            if op.text == text and (y is None or op.y == y):
                return op
        raise AssertionError(f"no text op for {text!r} at y={y}")

    def rect_before(self, op: TextOp) -> Optional[RectOp]:
        """The rect drawn immediately before op, if any."""
        idx = self.ops.index(op)
        prev = self.ops[idx - 1] if idx > 0 else None
        return prev if isinstance(prev, RectOp) else None


@pytest.fixture
def sample_xml():
    return SAMPLE_XML


@pytest.fixture
def settings(tmp_path):
    return Settings(font_path=str(tmp_path / "missing-font.ttf"))


class FakeFeed:
    """Async fetcher returning the queued payload, or raising when told to fail."""

    def __init__(self, payload: str = SAMPLE_XML) -> None:
        self.payload = payload
        self.fail = False
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.fail:
            raise ConnectionError("upstream down")
        return self.payload


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_feed():
    return FakeFeed()


@pytest.fixture
def clock():
    return FakeClock()
