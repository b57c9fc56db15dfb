import pytest

from solar_canvas.core.models import RenderConfig
from solar_canvas.render.theme import (
    BLACK_AND_WHITE,
    INVERT,
    NORMAL,
    Condition,
    classify_condition,
    condition_color,
    condition_highlight,
    metric_highlight,
    select_palette,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Good", Condition.GOOD),
        ("GOOD", Condition.GOOD),
        ("Mid LAT AUR", Condition.GOOD),
        ("Good, Mid Lat Aur", Condition.GOOD),
        ("Fair", Condition.FAIR),
        ("Poor", Condition.POOR),
        ("Band Closed", Condition.POOR),
        ("Poor/Closed", Condition.POOR),
        ("Fair or Poor", Condition.FAIR),
        ("50MHz ES", Condition.NEUTRAL),
        ("N/A", Condition.NEUTRAL),
    ],
)
def test_classify_condition(text, expected):
    assert classify_condition(text) is expected


def test_palette_precedence():
    assert select_palette(RenderConfig()) is NORMAL
    assert select_palette(RenderConfig(invert=1)) is INVERT
    assert select_palette(RenderConfig(invert=1, black_and_white=True)) is BLACK_AND_WHITE
    assert select_palette(RenderConfig(black_and_white=True)) is BLACK_AND_WHITE


def test_colored_mode_uses_condition_colors():
    config = RenderConfig()
    assert condition_color("Good", NORMAL, config) == NORMAL.good
    assert condition_color("Fair", NORMAL, config) == NORMAL.fair
    assert condition_color("Band Closed", NORMAL, config) == NORMAL.poor
    assert condition_color("50MHz ES", NORMAL, config) == NORMAL.text


def test_mode_zero_suppresses_color():
    config = RenderConfig(mode=0)
    colors = {condition_color(c, NORMAL, config) for c in ("Good", "Fair", "Poor", "Closed", "x")}
    assert colors == {NORMAL.text}


def test_black_and_white_uses_single_ink_even_in_colored_mode():
    config = RenderConfig(mode=1, invert=0, black_and_white=True)
    palette = select_palette(config)
    colors = {condition_color(c, palette, config) for c in ("Good", "Fair", "Poor", "Closed", "Mid Lat Aur", "x")}
    assert colors == {"#000000"}


def test_highlight_pairs():
    assert metric_highlight(NORMAL, RenderConfig()) == ("#00ff00", "#000000")
    assert metric_highlight(INVERT, RenderConfig(invert=1)) == ("#000000", "#ffffff")
    assert metric_highlight(NORMAL, RenderConfig(mode=0)) == ("#555555", "#ffffff")
    assert metric_highlight(BLACK_AND_WHITE, RenderConfig(black_and_white=True)) == ("#000000", "#ffffff")

    assert condition_highlight(INVERT, RenderConfig(invert=1)) == ("#00ff00", "#ffffff")
    assert condition_highlight(NORMAL, RenderConfig(mode=0)) == ("#555555", "#ffffff")
    assert condition_highlight(BLACK_AND_WHITE, RenderConfig(black_and_white=True)) == ("#000000", "#ffffff")
