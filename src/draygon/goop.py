"""Goop launch and flight test.

The projectile is not kept around as an entity: one fire event computes the
launch angle, then steps a 16.16 position until it either overlaps the target
hitbox or leaves the 0..512 play field.
"""

from __future__ import annotations

from snes.math import NATIVE_PI, abs_diff, cos_f32, f32, i16, sin_f32, trunc_i32
from snes.rng import RngSource

from .types import Side, Target

SPAWN_DX_LEFT = -0x1C
SPAWN_DX_RIGHT = 0x18
SPAWN_DY = -0x10

BASE_ANGLE_LEFT = 0xA0
BASE_ANGLE_RIGHT = 0xE0
ANGLE_SPREAD_MASK = 0x3F
ANGLE_SPREAD_BIAS = 0x20

GOOP_SPEED = 2
# Unit vectors are scaled by 0xFFFF, not 0x10000.
VELOCITY_SCALE = 65535.0

FIELD_MIN = 0
FIELD_MAX = 0x200

HIT_HALF_WIDTH = 0x10
HIT_HALF_HEIGHT = 0x14


def launch_angle(side: Side, roll: int) -> int:
    base = BASE_ANGLE_LEFT if side is Side.LEFT else BASE_ANGLE_RIGHT
    return base + (int(roll) & ANGLE_SPREAD_MASK) - ANGLE_SPREAD_BIAS


def launch_velocity(angle: int) -> tuple[int, int]:
    """16.16 per-frame velocity for a byte angle (0x40 = up, screen y grows down)."""

    radians = f32(f32(f32(float(angle)) * NATIVE_PI) / f32(128.0))
    vx = GOOP_SPEED * trunc_i32(f32(cos_f32(radians) * VELOCITY_SCALE))
    vy = GOOP_SPEED * trunc_i32(f32(-sin_f32(radians) * VELOCITY_SCALE))
    return vx, vy


def _on_field(coord: int) -> bool:
    return FIELD_MIN <= coord <= FIELD_MAX


def goop_hits(pos_x: int, pos_y: int, vx: int, vy: int, target: Target) -> bool:
    while _on_field(pos_x >> 16) and _on_field(pos_y >> 16):
        pos_x += vx
        pos_y += vy
        if (
            abs_diff(target.x, i16(pos_x >> 16)) < HIT_HALF_WIDTH
            and abs_diff(target.y, i16(pos_y >> 16)) < HIT_HALF_HEIGHT
        ):
            return True
    return False


def fire_goop(rng: RngSource, x: int, y: int, side: Side, target: Target) -> bool:
    spawn_x = x + (SPAWN_DX_LEFT if side is Side.LEFT else SPAWN_DX_RIGHT)
    spawn_y = y + SPAWN_DY

    # The angle draw happens even when the spawn point is already off the field.
    angle = launch_angle(side, rng.roll())
    vx, vy = launch_velocity(angle)
    return goop_hits(spawn_x << 16, spawn_y << 16, vx, vy, target)
