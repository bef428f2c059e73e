"""Byte sine table and the 16.16 `cosmul` used by enemy oscillation code."""

from __future__ import annotations

from .math import NATIVE_PI, f32, i32, neg16, sin_f32, trunc_u8, u8

__all__ = [
    "QUARTER_TURN",
    "SINE_TABLE",
    "cosmul",
    "sine_byte",
]

QUARTER_TURN = 0x40
HALF_TURN = 0x80


def sine_byte(index: int) -> int:
    """Half-wave sine sample scaled to a byte, computed in float32.

    Index 0x40 is the peak; 1.0 * 256 saturates to 0xFF.
    """

    index = int(index) & 0x7F
    radians = f32(f32(f32(float(index)) / f32(float(HALF_TURN))) * NATIVE_PI)
    return trunc_u8(f32(sin_f32(radians) * 256.0))


SINE_TABLE: tuple[int, ...] = tuple(sine_byte(index) for index in range(HALF_TURN))


def cosmul(amplitude: int, angle: int) -> int:
    """Return `amplitude * cos(angle)` as a signed 16.16 fixed-point value.

    The integer and fraction words are negated separately in the second
    half-turn, so the result is not the two's complement of the positive
    product whenever the fraction is non-zero.
    """

    theta = u8(int(angle) + QUARTER_TURN)
    product = u8(amplitude) * SINE_TABLE[theta & 0x7F]

    whole = product >> 8
    frac = (product & 0xFF) << 8
    if theta >= HALF_TURN:
        whole = neg16(whole)
        frac = neg16(frac)

    return i32((whole << 16) | frac)
