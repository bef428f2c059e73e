from __future__ import annotations

from pathlib import Path

import pytest

from draygon.config import SweepConfig, SweepConfigError, load_sweep_config
from draygon.types import Side


def test_defaults_cover_original_scan() -> None:
    config = SweepConfig()

    config.validate()
    assert config.side_values() == (Side.LEFT, Side.RIGHT)
    assert config.x_positions() == range(0x45, 0x19C)
    assert config.target_y == 0x1C9
    assert config.phases == 0x80


def test_worker_count_defaults_to_cpu_count(monkeypatch) -> None:
    monkeypatch.setattr("draygon.config.os.cpu_count", lambda: 6)

    assert SweepConfig().worker_count() == 6
    assert SweepConfig(workers=3).worker_count() == 3


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"sides": ()}, "at least one side"),
        ({"sides": ("up",)}, "unknown side"),
        ({"x_min": 0x100, "x_max": 0x45}, "past x_max"),
        ({"x_step": 0}, "x_step"),
        ({"phases": 0}, "phases"),
        ({"phases": 0x101}, "phases"),
        ({"workers": -1}, "workers"),
        ({"chunk_size": 0}, "chunk_size"),
    ],
)
def test_validate_rejects_bad_values(overrides: dict[str, object], message: str) -> None:
    config = SweepConfig(**overrides)  # type: ignore[arg-type]

    with pytest.raises(SweepConfigError, match=message):
        config.validate()


def test_load_from_json(tmp_path: Path) -> None:
    path = tmp_path / "sweep.json"
    path.write_text('{"sides": ["right"], "x_min": 185, "x_max": 190, "workers": 1}', encoding="utf-8")

    config = load_sweep_config(path)

    assert config.side_values() == (Side.RIGHT,)
    assert list(config.x_positions()) == list(range(185, 191))
    assert config.phases == 0x80


def test_load_rejects_unknown_fields(tmp_path: Path) -> None:
    path = tmp_path / "sweep.json"
    path.write_text('{"sidez": ["right"]}', encoding="utf-8")

    with pytest.raises(SweepConfigError):
        load_sweep_config(path)


def test_load_rejects_invalid_ranges(tmp_path: Path) -> None:
    path = tmp_path / "sweep.json"
    path.write_text('{"x_min": 500, "x_max": 100}', encoding="utf-8")

    with pytest.raises(SweepConfigError, match="past x_max"):
        load_sweep_config(path)
