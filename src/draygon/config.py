from __future__ import annotations

import os
from pathlib import Path

import msgspec

from .types import Side

DEFAULT_SIDES = ("left", "right")
DEFAULT_X_MIN = 0x45
DEFAULT_X_MAX = 0x19B
DEFAULT_TARGET_Y = 0x1C9
GLOBAL_TIMER_PHASES = 0x80
DEFAULT_CHUNK_SIZE = 256


class SweepConfigError(ValueError):
    pass


class SweepConfig(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    sides: tuple[str, ...] = DEFAULT_SIDES
    x_min: int = DEFAULT_X_MIN
    x_max: int = DEFAULT_X_MAX
    x_step: int = 1
    target_y: int = DEFAULT_TARGET_Y
    phases: int = GLOBAL_TIMER_PHASES
    # 0 = one worker per CPU, 1 = run in-process.
    workers: int = 0
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def validate(self) -> None:
        if not self.sides:
            raise SweepConfigError("at least one side is required")
        try:
            self.side_values()
        except ValueError as exc:
            raise SweepConfigError(str(exc)) from exc
        if self.x_min > self.x_max:
            raise SweepConfigError(f"x_min (0x{self.x_min:x}) is past x_max (0x{self.x_max:x})")
        if self.x_step <= 0:
            raise SweepConfigError(f"x_step must be positive, got {self.x_step}")
        if not (1 <= self.phases <= 0x100):
            raise SweepConfigError(f"phases must be in 1..256, got {self.phases}")
        if self.workers < 0:
            raise SweepConfigError(f"workers must be >= 0, got {self.workers}")
        if self.chunk_size <= 0:
            raise SweepConfigError(f"chunk_size must be positive, got {self.chunk_size}")

    def side_values(self) -> tuple[Side, ...]:
        return tuple(Side.parse(name) for name in self.sides)

    def x_positions(self) -> range:
        return range(int(self.x_min), int(self.x_max) + 1, int(self.x_step))

    def worker_count(self) -> int:
        if self.workers > 0:
            return int(self.workers)
        return max(1, os.cpu_count() or 1)


def load_sweep_config(path: Path) -> SweepConfig:
    try:
        config = msgspec.json.decode(Path(path).read_bytes(), type=SweepConfig)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise SweepConfigError(f"{path}: {exc}") from exc
    config.validate()
    return config
