from __future__ import annotations

from pathlib import Path

import pytest

from draygon.seedfile import MAGIC, SeedFile, SeedFileError, dump, dumps, load, loads


def test_seed_file_roundtrip_bytes() -> None:
    raw = dumps(0x0061, [0x0000, 0x0111, 0xEF47, 0xFFFF])

    parsed = loads(raw)

    assert parsed == SeedFile(reset_seed=0x0061, seeds=(0x0000, 0x0111, 0xEF47, 0xFFFF))
    assert dumps(parsed.reset_seed, parsed.seeds) == raw


def test_seed_file_layout() -> None:
    raw = dumps(0x0061, [0xEF47])

    assert raw.startswith(MAGIC)
    # magic, version u16, reset u16, count u32, then u16le seeds.
    assert raw[len(MAGIC) :] == bytes([0x01, 0x00, 0x61, 0x00, 0x01, 0x00, 0x00, 0x00, 0x47, 0xEF])


def test_seed_file_on_disk(tmp_path: Path) -> None:
    path = tmp_path / "seeds.bin"

    dump(path, 0x0061, range(8))

    assert load(path).seeds == tuple(range(8))


def test_seed_file_rejects_bad_magic() -> None:
    with pytest.raises(SeedFileError, match="invalid magic"):
        loads(b"NOTSEEDS" + dumps(0, [])[len(MAGIC) :])


def test_seed_file_rejects_truncation() -> None:
    raw = dumps(0x0061, [1, 2, 3])

    with pytest.raises(SeedFileError, match="unexpected EOF"):
        loads(raw[:-1])
    with pytest.raises(SeedFileError, match="unexpected EOF"):
        loads(raw[:4])


def test_seed_file_rejects_trailing_data() -> None:
    with pytest.raises(SeedFileError, match="trailing data"):
        loads(dumps(0x0061, [1]) + b"\x00")


def test_seed_file_rejects_unknown_version() -> None:
    raw = bytearray(dumps(0x0061, []))
    raw[len(MAGIC)] = 2

    with pytest.raises(SeedFileError, match="unsupported seed file version"):
        loads(bytes(raw))
