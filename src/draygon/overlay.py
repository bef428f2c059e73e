from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image, ImageDraw

from .goop import FIELD_MAX
from .sweep import SweepTable
from .types import Side

DEFAULT_BAND_HEIGHT = 0x10
DEFAULT_ALPHA = 0xC0
EMPTY_COLOR = (0x40, 0x40, 0x40)


@dataclass(frozen=True, slots=True)
class ColorStop:
    at: float
    rgb: tuple[int, int, int]


# Cold to hot: blue, green, yellow, red.
HEAT_RAMP: tuple[ColorStop, ...] = (
    ColorStop(0.0, (0x20, 0x30, 0xD0)),
    ColorStop(0.33, (0x20, 0xC0, 0x40)),
    ColorStop(0.66, (0xF0, 0xE0, 0x20)),
    ColorStop(1.0, (0xE0, 0x20, 0x20)),
)


def _lerp(a: int, b: int, t: float) -> int:
    return int(round(a + (b - a) * t))


def heat_color(value: float, ramp: Sequence[ColorStop] = HEAT_RAMP) -> tuple[int, int, int]:
    value = min(1.0, max(0.0, float(value)))
    for lo, hi in zip(ramp, ramp[1:]):
        if value <= hi.at:
            span = hi.at - lo.at
            t = 0.0 if span <= 0.0 else (value - lo.at) / span
            return (
                _lerp(lo.rgb[0], hi.rgb[0], t),
                _lerp(lo.rgb[1], hi.rgb[1], t),
                _lerp(lo.rgb[2], hi.rgb[2], t),
            )
    return ramp[-1].rgb


def _band_rows(side: Side, target_y: int, band_height: int) -> tuple[int, int]:
    # Left-side results sit just above the target line, right-side just below.
    if side is Side.LEFT:
        return target_y - band_height, target_y - 1
    return target_y, target_y + band_height - 1


def render_overlay(
    table: SweepTable,
    *,
    background: Image.Image | None = None,
    target_y: int | None = None,
    band_height: int = DEFAULT_BAND_HEIGHT,
    alpha: int = DEFAULT_ALPHA,
    normalize: bool = True,
) -> Image.Image:
    """Paint each (side, x) probability as a one-pixel column around the target y.

    With `normalize`, colors are scaled to the table's highest probability so
    small percentages still span the whole ramp. `target_y` moves the bands
    away from the table's own target line.
    """

    if background is not None:
        base = background.convert("RGBA")
    else:
        base = Image.new("RGBA", (FIELD_MAX, FIELD_MAX), (0, 0, 0, 0xFF))

    line_y = int(table.target_y if target_y is None else target_y)
    peak = max((row.probability for row in table.rows), default=0.0)
    scale = peak if normalize and peak > 0.0 else 1.0

    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    for row in table.rows:
        side = Side.parse(row.side)
        top, bottom = _band_rows(side, line_y, int(band_height))
        rgb = EMPTY_COLOR if row.hit_count == 0 else heat_color(row.probability / scale)
        draw.line([(row.x, top), (row.x, bottom)], fill=(*rgb, int(alpha) & 0xFF))

    return Image.alpha_composite(base, layer)
