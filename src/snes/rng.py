from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar, Protocol

__all__ = [
    "RESET_SEED",
    "SEED_SPACE",
    "CycleReport",
    "Rng",
    "RngSource",
    "SeedLoop",
    "analyze",
    "next_seed",
]

RESET_SEED = 0x0061
SEED_SPACE = 0x1_0000


class RngSource(Protocol):
    def roll(self) -> int: ...

    def read(self) -> int: ...

    def frame_advance(self) -> None: ...


def next_seed(seed: int) -> int:
    """One step of the game's random number routine.

    Matches:
      lo = (seed & 0xff) * 5                   ; hardware multiply, 16-bit
      hi = ((seed >> 8) * 5) & 0xff            ; only the low byte is kept
      mid = hi + (lo >> 8) + 1                 ; SEC; ADC (8-bit)
      seed = ((mid & 0xff) << 8 | (lo & 0xff)) + 0x11 + (mid >> 8)

    The carry out of the high byte is added back in at the bottom instead of
    being dropped. Some seeds therefore share a successor (0x0000 and 0x3333
    both step to 0x0111), and the seed space splits into loops with tails.
    """

    seed = int(seed) & 0xFFFF
    lo = (seed & 0xFF) * 5
    hi = ((seed >> 8) * 5) & 0xFF
    mid = hi + (lo >> 8) + 1
    return ((((mid & 0xFF) << 8) | (lo & 0xFF)) + 0x11 + (mid >> 8)) & 0xFFFF


class Rng:
    """16-bit game RNG.

    `roll()` runs the generator and returns the new low byte. `read()` returns
    the low byte of the current seed without running the generator, matching
    code that loads the seed word directly. `frame_advance()` is the once per
    frame step that happens outside of any enemy code.
    """

    __slots__ = ("_seed",)

    RESET: ClassVar[Rng]

    def __init__(self, seed: int = RESET_SEED) -> None:
        self._seed = int(seed) & 0xFFFF

    @property
    def seed(self) -> int:
        return self._seed

    def with_seed(self, seed: int) -> Rng:
        return Rng(seed)

    def roll(self) -> int:
        self._seed = next_seed(self._seed)
        return self._seed & 0xFF

    def read(self) -> int:
        return self._seed & 0xFF

    def frame_advance(self) -> None:
        self._seed = next_seed(self._seed)

    def __repr__(self) -> str:
        return f"Rng(seed=0x{self._seed:04x})"


Rng.RESET = Rng(RESET_SEED)


@dataclass(frozen=True, slots=True)
class SeedLoop:
    # Loop members in generator order, starting from the smallest seed.
    seeds: tuple[int, ...]
    # Seeds outside the loop that eventually fall into it.
    tail_count: int

    def __len__(self) -> int:
        return len(self.seeds)

    @property
    def basin_size(self) -> int:
        return len(self.seeds) + int(self.tail_count)


@dataclass(frozen=True, slots=True)
class CycleReport:
    reset_seed: int
    # The loop entered from `reset_seed` comes first, then by descending length.
    loops: tuple[SeedLoop, ...]

    @property
    def reset_loop(self) -> SeedLoop:
        return self.loops[0]

    @property
    def total_seeds(self) -> int:
        return sum(loop.basin_size for loop in self.loops)


def _rotate_to_min(cycle: list[int]) -> tuple[int, ...]:
    start = cycle.index(min(cycle))
    return tuple(cycle[start:] + cycle[:start])


def analyze(
    *,
    step: Callable[[int], int] = next_seed,
    reset: int = RESET_SEED,
    space: int = SEED_SPACE,
) -> CycleReport:
    """Partition the seed space into loops of the generator's functional graph."""

    space = int(space)
    if space <= 0:
        raise ValueError(f"seed space must be positive, got {space}")
    reset = int(reset) % space

    # 0 = unvisited, 1 = on the walk in progress, 2 = resolved.
    marks = bytearray(space)
    loop_of = [-1] * space
    cycles: list[list[int]] = []

    for start in range(space):
        if marks[start]:
            continue
        path: list[int] = []
        seed = start
        while marks[seed] == 0:
            marks[seed] = 1
            path.append(seed)
            seed = int(step(seed)) % space

        if marks[seed] == 1:
            loop_id = len(cycles)
            cycles.append(path[path.index(seed) :])
        else:
            loop_id = loop_of[seed]

        for member in path:
            marks[member] = 2
            loop_of[member] = loop_id

    basin_sizes = [0] * len(cycles)
    for loop_id in loop_of:
        basin_sizes[loop_id] += 1

    reset_id = loop_of[reset]
    order = sorted(
        range(len(cycles)),
        key=lambda loop_id: (loop_id != reset_id, -len(cycles[loop_id]), min(cycles[loop_id])),
    )
    loops = tuple(
        SeedLoop(
            seeds=_rotate_to_min(cycles[loop_id]),
            tail_count=basin_sizes[loop_id] - len(cycles[loop_id]),
        )
        for loop_id in order
    )
    return CycleReport(reset_seed=reset, loops=loops)
