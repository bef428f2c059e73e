"""Opt-in sweep trace.

The file starts with one `#` header line, then one line per event:

    0.004 row_done side=right x=0x0b9 hits=3 total=256

The leading number is seconds since the trace was opened. Fields keep the order
they were passed in; values containing whitespace are quoted.
"""

from __future__ import annotations

import datetime as dt
import os
from pathlib import Path
from threading import Lock
import time


def _render(value: object) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    text = str(value)
    if not text or any(ch.isspace() for ch in text) or '"' in text:
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'
    return text


class SweepTrace:
    __slots__ = ("path", "_lock", "_opened")

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = Lock()
        self._opened = time.perf_counter()

    def header(self, **fields: object) -> None:
        stamp = dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        self._append(" ".join(["#", "sweep-trace", f"started={stamp}", f"pid={os.getpid()}", *self._pairs(fields)]))

    def event(self, name: str, **fields: object) -> None:
        elapsed = time.perf_counter() - self._opened
        self._append(" ".join([f"{elapsed:.3f}", str(name).strip(), *self._pairs(fields)]))

    @staticmethod
    def _pairs(fields: dict[str, object]) -> list[str]:
        return [f"{key}={_render(value)}" for key, value in fields.items()]

    def _append(self, line: str) -> None:
        with self._lock, self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")


_active: SweepTrace | None = None


def sweep_trace_path() -> Path | None:
    trace = _active
    return None if trace is None else trace.path


def init_sweep_trace(path: Path, **header: object) -> Path:
    """Start appending sweep events to `path`; `header` fields go on the `#` line."""

    global _active
    trace = SweepTrace(path)
    trace.path.parent.mkdir(parents=True, exist_ok=True)
    trace.header(**header)
    _active = trace
    return trace.path


def disable_sweep_trace() -> None:
    global _active
    _active = None


def sweep_trace(event: str, **fields: object) -> None:
    trace = _active
    if trace is not None:
        trace.event(event, **fields)
