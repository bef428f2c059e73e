from __future__ import annotations

from dataclasses import dataclass

from snes.math import abs_diff, i16, u8
from snes.rng import Rng, RngSource
from snes.trig import cosmul

from .goop import fire_goop
from .types import Side, Target

SPAWN_X_LEFT = 0x250
SPAWN_X_RIGHT = -0x50
SPAWN_Y = 0x180
Y_SWING = 0x20

AGGRO_RANGE = 0xD0
GOOP_COUNT = 0x10
GOOP_DELAY = 7

TURRET_PERIOD_MASK = 0x3F
BUBBLE_PERIOD_MASK = 0x7F

# Right side exits once x >= EXIT_X_RIGHT, left side once x < EXIT_X_LEFT.
EXIT_X_RIGHT = 0x2A0
EXIT_X_LEFT = -0x50

# Longest walk is right to left edge (0x2F0 moves) plus the frame spent latching range.
MAX_ENCOUNTER_FRAMES = 0x300


class EncounterOverrunError(RuntimeError):
    pass


@dataclass(slots=True)
class EncounterState:
    x: int
    y: int
    side: Side
    y_angle: int = 0
    goop_counter: int = GOOP_COUNT
    goop_timer: int = 0
    global_timer: int = 0
    in_range: bool = False

    @classmethod
    def spawn(cls, side: Side, global_timer: int) -> EncounterState:
        return cls(
            x=SPAWN_X_LEFT if side is Side.LEFT else SPAWN_X_RIGHT,
            y=SPAWN_Y,
            side=side,
            global_timer=u8(global_timer),
        )

    def exited(self) -> bool:
        if self.side is Side.LEFT:
            return self.x < EXIT_X_LEFT
        return self.x >= EXIT_X_RIGHT


@dataclass(frozen=True, slots=True)
class Continue:
    pass


@dataclass(frozen=True, slots=True)
class Terminated:
    hit: bool


StepResult = Continue | Terminated

CONTINUE = Continue()
HIT = Terminated(hit=True)
MISS = Terminated(hit=False)


def _advance(state: EncounterState) -> None:
    state.x = i16(state.x + state.side.direction)
    state.y_angle = u8(state.y_angle + 1)


def step(state: EncounterState, rng: RngSource, target: Target) -> StepResult:
    """Run one frame of Draygon's entrance/goop AI.

    Every RNG draw below is order sensitive: the turret and bubble rolls share
    the generator with the goop arming check and the launch angle.
    """

    if state.global_timer & TURRET_PERIOD_MASK == 0 and (state.side is Side.RIGHT or not state.in_range):
        # turret firing
        rng.roll()

    state.y = i16(SPAWN_Y + (cosmul(Y_SWING, state.y_angle) >> 16))
    if not state.in_range:
        if abs_diff(state.x, target.x) < AGGRO_RANGE:
            state.in_range = True
        else:
            _advance(state)
    else:
        if rng.read() & 0xF == 0:
            state.goop_timer = GOOP_DELAY
        _advance(state)

    if state.goop_timer != 0:
        state.goop_timer -= 1
        if state.goop_timer == 0:
            state.goop_counter -= 1
            if state.goop_counter == 0:
                return MISS
            if fire_goop(rng, state.x, state.y, state.side, target):
                return HIT

    if state.global_timer & BUBBLE_PERIOD_MASK == 0:
        # bubbles
        rng.roll()
    state.global_timer = u8(state.global_timer + 1)

    if state.exited():
        return MISS
    return CONTINUE


def simulate_goop(rng: RngSource, global_timer: int, side: Side, target: Target) -> bool:
    """Run one encounter to completion; True when a goop connects."""

    state = EncounterState.spawn(side, global_timer)
    for _ in range(MAX_ENCOUNTER_FRAMES):
        result = step(state, rng, target)
        if isinstance(result, Terminated):
            return result.hit
        rng.frame_advance()
    raise EncounterOverrunError(
        f"encounter did not finish in {MAX_ENCOUNTER_FRAMES} frames "
        f"(side={side.value} x={state.x} goop_counter={state.goop_counter})"
    )


def run_trial(seed: int, global_timer: int, side: Side, target: Target) -> bool:
    return simulate_goop(Rng.RESET.with_seed(seed), global_timer, side, target)
