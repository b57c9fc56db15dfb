"""
Color palettes and condition classification for the solar canvas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from solar_canvas.core.models import RenderConfig

MONO_HIGHLIGHT = "#555555"
MONO_HIGHLIGHT_TEXT = "#ffffff"
BW_HIGHLIGHT = "#000000"
BW_HIGHLIGHT_TEXT = "#ffffff"


@dataclass(frozen=True)
class Palette:
    name: str
    background: str
    title: str
    subtitle: str
    text: str
    separator: str
    good: str
    highlight: str  # fill behind the top-row metrics in colored mode
    fair: str
    poor: str


NORMAL = Palette(
    name="normal", background="#000000", title="#cccccc", subtitle="#aaaaaa", text="#ffffff",
    separator="#555555", good="#00ff00", highlight="#00ff00", fair="#FFA500", poor="#ff0000",
)
INVERT = Palette(
    name="invert", background="#ffffff", title="#555", subtitle="#666", text="#000000",
    separator="#555555", good="#00ff00", highlight="#000000", fair="#FFA500", poor="#ff0000",
)
BLACK_AND_WHITE = Palette(
    name="bw", background="#ffffff", title="#000000", subtitle="#333333", text="#000000",
    separator="#bbbbbb", good="#000000", highlight="#000000", fair="#000000", poor="#000000",
)


class Condition(Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    NEUTRAL = "neutral"


# First match wins.
_RULES: Tuple[Tuple[Tuple[str, ...], Condition], ...] = (
    (("good", "mid lat aur"), Condition.GOOD),
    (("fair",), Condition.FAIR),
    (("poor", "closed"), Condition.POOR),
)


def select_palette(config: RenderConfig) -> Palette:
    """black_and_white beats invert, invert beats the dark default."""
    if config.black_and_white:
        return BLACK_AND_WHITE
    if config.invert:
        return INVERT
    return NORMAL


def classify_condition(condition: str) -> Condition:
    """Case-insensitive substring classification of a condition string."""
    lowered = condition.lower()
    for needles, result in _RULES:
        if any(needle in lowered for needle in needles):
            return result
    return Condition.NEUTRAL


def condition_color(condition: str, palette: Palette, config: RenderConfig) -> str:
    """Ink for a condition string; plain text color when coloring is off."""
    if config.black_and_white or config.mode == 0:
        return palette.text

    kind = classify_condition(condition)
    if kind is Condition.GOOD:
        return palette.good
    if kind is Condition.FAIR:
        return palette.fair
    if kind is Condition.POOR:
        return palette.poor
    return palette.text


def metric_highlight(palette: Palette, config: RenderConfig) -> Tuple[str, str]:
    """(fill, text) pair for the boxed top-row metrics."""
    if config.black_and_white:
        return BW_HIGHLIGHT, BW_HIGHLIGHT_TEXT
    if config.mode == 0:
        return MONO_HIGHLIGHT, MONO_HIGHLIGHT_TEXT
    return palette.highlight, palette.background


def condition_highlight(palette: Palette, config: RenderConfig) -> Tuple[str, str]:
    """(fill, text) pair for boxed "good" band conditions."""
    if config.black_and_white:
        return BW_HIGHLIGHT, BW_HIGHLIGHT_TEXT
    if config.mode == 0:
        return MONO_HIGHLIGHT, MONO_HIGHLIGHT_TEXT
    return palette.good, palette.background
