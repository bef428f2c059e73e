from __future__ import annotations

__all__ = [
    "math",
    "rng",
    "trig",
]
