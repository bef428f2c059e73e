"""Exhaustive (side, x, seed, phase) sweep reduced to per-x hit counts."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Executor, ProcessPoolExecutor
from dataclasses import dataclass
import time

import msgspec

from .config import SweepConfig
from .encounter import run_trial
from .trace import sweep_trace
from .types import Side, Target


class SweepRow(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    side: str
    x: int
    hit_count: int
    total_trials: int
    probability: float


class SweepTable(msgspec.Struct, forbid_unknown_fields=True):
    seed_count: int
    phases: int
    target_y: int
    rows: list[SweepRow] = msgspec.field(default_factory=list)

    def rows_for(self, side: Side) -> list[SweepRow]:
        return [row for row in self.rows if row.side == side.value]


_TABLE_DECODER = msgspec.json.Decoder(type=SweepTable)


def encode_table(table: SweepTable) -> bytes:
    return msgspec.json.encode(table)


def decode_table(data: bytes) -> SweepTable:
    return _TABLE_DECODER.decode(data)


@dataclass(frozen=True, slots=True)
class SweepTask:
    side: Side
    x: int
    y: int
    seeds: tuple[int, ...]
    phases: int


def count_hits(task: SweepTask) -> int:
    target = Target(task.x, task.y)
    hits = 0
    for seed in task.seeds:
        for phase in range(task.phases):
            if run_trial(seed, phase, task.side, target):
                hits += 1
    return hits


def _chunks(seeds: Sequence[int], size: int) -> Iterator[tuple[int, ...]]:
    for start in range(0, len(seeds), size):
        yield tuple(seeds[start : start + size])


def make_row(side: Side, x: int, hit_count: int, total_trials: int) -> SweepRow:
    probability = hit_count / total_trials if total_trials else 0.0
    return SweepRow(
        side=side.value,
        x=int(x),
        hit_count=int(hit_count),
        total_trials=int(total_trials),
        probability=float(probability),
    )


def _sweep_rows(
    seeds: tuple[int, ...],
    config: SweepConfig,
    map_fn: Callable[[Callable[[SweepTask], int], list[SweepTask]], Iterator[int]],
    on_row: Callable[[SweepRow], None] | None,
) -> list[SweepRow]:
    total_trials = len(seeds) * int(config.phases)
    chunks = list(_chunks(seeds, int(config.chunk_size)))
    rows: list[SweepRow] = []
    for side in config.side_values():
        for x in config.x_positions():
            tasks = [
                SweepTask(side=side, x=int(x), y=int(config.target_y), seeds=chunk, phases=int(config.phases))
                for chunk in chunks
            ]
            hit_count = sum(map_fn(count_hits, tasks))
            row = make_row(side, x, hit_count, total_trials)
            sweep_trace("row_done", side=row.side, x=f"0x{row.x:03x}", hits=row.hit_count, total=row.total_trials)
            rows.append(row)
            if on_row is not None:
                on_row(row)
    return rows


def run_sweep(
    seeds: Sequence[int],
    config: SweepConfig | None = None,
    *,
    on_row: Callable[[SweepRow], None] | None = None,
    executor: Executor | None = None,
) -> SweepTable:
    """Run every (seed, phase) trial for each configured side and target x.

    Rows come back ordered by side, then x. Each row's count is a plain sum of
    per-chunk counts, so chunks may finish in any order on any worker.
    """

    config = config or SweepConfig()
    config.validate()
    seeds = tuple(int(seed) & 0xFFFF for seed in seeds)

    sweep_trace(
        "sweep_start",
        seeds=len(seeds),
        phases=config.phases,
        sides=",".join(config.sides),
        x_min=f"0x{config.x_min:03x}",
        x_max=f"0x{config.x_max:03x}",
        workers=config.worker_count(),
    )
    started = time.perf_counter()

    if executor is not None:
        rows = _sweep_rows(seeds, config, executor.map, on_row)
    elif config.worker_count() <= 1:
        rows = _sweep_rows(seeds, config, map, on_row)
    else:
        with ProcessPoolExecutor(max_workers=config.worker_count()) as pool:
            rows = _sweep_rows(seeds, config, pool.map, on_row)

    sweep_trace("sweep_done", rows=len(rows), seconds=f"{time.perf_counter() - started:.3f}")
    return SweepTable(seed_count=len(seeds), phases=int(config.phases), target_y=int(config.target_y), rows=rows)
