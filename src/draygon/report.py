from __future__ import annotations

from collections.abc import Iterable, Iterator

from .sweep import SweepRow, SweepTable


def percent_hundredths(hit_count: int, total_trials: int) -> int:
    """`round(hit_count / total_trials * 10000)` with halves rounded up, in exact integers."""

    total_trials = int(total_trials)
    if total_trials <= 0:
        return 0
    return (int(hit_count) * 20000 + total_trials) // (2 * total_trials)


def format_percent(hit_count: int, total_trials: int) -> str:
    hundredths = percent_hundredths(hit_count, total_trials)
    return f"{hundredths // 100}.{hundredths % 100:02d}"


def side_header(side: str) -> str:
    return f"{side}:"


def format_row(row: SweepRow) -> str:
    percent = format_percent(row.hit_count, row.total_trials)
    return f"    {row.x:#05x}: {percent}% ({row.hit_count} / {row.total_trials})"


def iter_report_lines(rows: Iterable[SweepRow]) -> Iterator[str]:
    side: str | None = None
    for row in rows:
        if row.side != side:
            side = row.side
            yield side_header(side)
        yield format_row(row)


def render_report(table: SweepTable) -> str:
    return "\n".join(iter_report_lines(table.rows)) + "\n"
