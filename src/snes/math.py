"""Fixed-width integer and float32 helpers for SNES arithmetic parity."""

from __future__ import annotations

import math
import struct

__all__ = [
    "NATIVE_PI",
    "abs_diff",
    "cos_f32",
    "f32",
    "i16",
    "i32",
    "neg16",
    "sin_f32",
    "trunc_i32",
    "trunc_u8",
    "u8",
    "u16",
]


def _f32_from_bits(bits: int) -> float:
    return struct.unpack("<f", struct.pack("<I", int(bits) & 0xFFFFFFFF))[0]


# `std::f32::consts::PI` as used by the reference tooling.
NATIVE_PI = _f32_from_bits(0x40490FDB)


def u8(value: int) -> int:
    return int(value) & 0xFF


def u16(value: int) -> int:
    return int(value) & 0xFFFF


def i16(value: int) -> int:
    raw = int(value) & 0xFFFF
    if raw & 0x8000:
        raw -= 0x1_0000
    return raw


def i32(value: int) -> int:
    raw = int(value) & 0xFFFF_FFFF
    if raw & 0x8000_0000:
        raw -= 0x1_0000_0000
    return raw


def neg16(value: int) -> int:
    """Two's-complement negation of a 16-bit word (0x8000 stays 0x8000)."""
    return (-int(value)) & 0xFFFF


def abs_diff(a: int, b: int) -> int:
    return abs(int(a) - int(b))


def f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", float(value)))[0]


def sin_f32(radians: float) -> float:
    return f32(math.sin(float(radians)))


def cos_f32(radians: float) -> float:
    return f32(math.cos(float(radians)))


def trunc_u8(value: float) -> int:
    """Float to u8 cast: truncate toward zero, saturate, NaN maps to 0."""
    value = float(value)
    if math.isnan(value) or value <= 0.0:
        return 0
    if value >= 255.0:
        return 0xFF
    return int(value)


def trunc_i32(value: float) -> int:
    """Float to i32 cast: truncate toward zero, saturate, NaN maps to 0."""
    value = float(value)
    if math.isnan(value):
        return 0
    if value >= 2147483647.0:
        return 0x7FFF_FFFF
    if value <= -2147483648.0:
        return -0x8000_0000
    return int(value)
