from __future__ import annotations

from PIL import Image

from draygon.overlay import EMPTY_COLOR, HEAT_RAMP, heat_color, render_overlay
from draygon.sweep import SweepTable, make_row
from draygon.types import Side


def _table() -> SweepTable:
    return SweepTable(
        seed_count=1,
        phases=4,
        target_y=0x1C9,
        rows=[
            make_row(Side.LEFT, 0x50, 4, 4),
            make_row(Side.LEFT, 0x51, 0, 4),
            make_row(Side.RIGHT, 0x50, 2, 4),
        ],
    )


def test_heat_color_endpoints_and_clamp() -> None:
    assert heat_color(0.0) == HEAT_RAMP[0].rgb
    assert heat_color(1.0) == HEAT_RAMP[-1].rgb
    assert heat_color(-1.0) == HEAT_RAMP[0].rgb
    assert heat_color(2.0) == HEAT_RAMP[-1].rgb


def test_overlay_draws_left_above_and_right_below_target_line() -> None:
    image = render_overlay(_table(), alpha=0xFF)

    assert image.size == (0x200, 0x200)
    assert image.getpixel((0x50, 0x1C8))[:3] == HEAT_RAMP[-1].rgb
    assert image.getpixel((0x50, 0x1C9 - 0x10))[:3] == HEAT_RAMP[-1].rgb
    assert image.getpixel((0x51, 0x1C8))[:3] == EMPTY_COLOR
    # Right row is at half the peak probability.
    assert image.getpixel((0x50, 0x1C9))[:3] == heat_color(0.5)
    assert image.getpixel((0x52, 0x1C8)) == (0, 0, 0, 0xFF)


def test_overlay_raw_scale_uses_absolute_probability() -> None:
    image = render_overlay(_table(), alpha=0xFF, normalize=False)

    assert image.getpixel((0x50, 0x1C9))[:3] == heat_color(0.5)
    assert image.getpixel((0x50, 0x1C8))[:3] == heat_color(1.0)


def test_overlay_keeps_background_size() -> None:
    background = Image.new("RGB", (640, 480), (10, 20, 30))

    image = render_overlay(_table(), background=background)

    assert image.size == (640, 480)
    assert image.mode == "RGBA"
    assert image.getpixel((5, 5)) == (10, 20, 30, 0xFF)


def test_overlay_target_y_override_moves_bands() -> None:
    image = render_overlay(_table(), target_y=0x100, alpha=0xFF)

    assert image.getpixel((0x50, 0xFF))[:3] == HEAT_RAMP[-1].rgb
    assert image.getpixel((0x50, 0x100))[:3] == heat_color(0.5)
    assert image.getpixel((0x50, 0x1C8)) == (0, 0, 0, 0xFF)
