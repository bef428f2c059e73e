"""Binary seed list written once by the cycle analysis and reused by sweeps."""

from __future__ import annotations

from dataclasses import dataclass
import io
from pathlib import Path
from typing import Final, Iterable

from construct import Array, Const, ConstError, ConstructError, Int16ul, Int32ul, StreamError, Struct
from construct import Terminated, TerminatedError

MAGIC: Final[bytes] = b"DGSEEDS\x00"
VERSION: Final[int] = 1


class SeedFileError(ValueError):
    pass


_MAGIC = Const(MAGIC)

_HEADER_V1 = Struct(
    "version" / Int16ul,
    "reset_seed" / Int16ul,
    "count" / Int32ul,
)


@dataclass(frozen=True, slots=True)
class SeedFile:
    reset_seed: int
    seeds: tuple[int, ...]


def loads(data: bytes) -> SeedFile:
    stream = io.BytesIO(data)

    try:
        _MAGIC.parse_stream(stream)
    except StreamError as exc:
        raise SeedFileError("unexpected EOF") from exc
    except ConstError as exc:
        raise SeedFileError("invalid magic") from exc

    try:
        header = _HEADER_V1.parse_stream(stream)
    except ConstructError as exc:
        raise SeedFileError("unexpected EOF") from exc

    version = int(header["version"])
    if version != VERSION:
        raise SeedFileError(f"unsupported seed file version: {version}")

    try:
        seeds_raw = Array(int(header["count"]), Int16ul).parse_stream(stream)
        Terminated.parse_stream(stream)
    except StreamError as exc:
        raise SeedFileError("unexpected EOF") from exc
    except TerminatedError as exc:
        raise SeedFileError("trailing data") from exc
    except ConstructError as exc:
        raise SeedFileError(str(exc)) from exc

    return SeedFile(reset_seed=int(header["reset_seed"]), seeds=tuple(int(seed) for seed in seeds_raw))


def load(path: Path) -> SeedFile:
    return loads(Path(path).read_bytes())


def dumps(reset_seed: int, seeds: Iterable[int]) -> bytes:
    seeds = [int(seed) & 0xFFFF for seed in seeds]
    header_raw = {
        "version": int(VERSION),
        "reset_seed": int(reset_seed) & 0xFFFF,
        "count": len(seeds),
    }
    out = bytearray(MAGIC)
    out += _HEADER_V1.build(header_raw)
    out += Array(len(seeds), Int16ul).build(seeds)
    return bytes(out)


def dump(path: Path, reset_seed: int, seeds: Iterable[int]) -> None:
    Path(path).write_bytes(dumps(reset_seed, seeds))
