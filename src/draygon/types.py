from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Side(Enum):
    """Which side of the room Draygon enters from."""

    LEFT = "left"
    RIGHT = "right"

    @property
    def direction(self) -> int:
        return -1 if self is Side.LEFT else 1

    @classmethod
    def parse(cls, name: str) -> Side:
        normalized = str(name).strip().lower()
        for side in cls:
            if side.value == normalized:
                return side
        raise ValueError(f"unknown side: {name!r} (expected left|right)")


@dataclass(frozen=True, slots=True)
class Target:
    """Stationary stand-in for Samus; only used for range and hitbox checks."""

    x: int
    y: int
