from __future__ import annotations

from pathlib import Path

import msgspec
import typer
from PIL import Image

from snes.rng import analyze
from . import seedfile
from .config import SweepConfig, SweepConfigError, load_sweep_config
from .encounter import run_trial
from .overlay import render_overlay
from .report import format_row, side_header
from .seedfile import SeedFileError
from .sweep import SweepRow, decode_table, encode_table, run_sweep
from .trace import init_sweep_trace
from .types import Side, Target


app = typer.Typer(add_completion=False)


def _int_literal(value: str | int) -> int:
    if isinstance(value, int):
        return value
    return int(str(value).strip(), 0)


def _parse_side(name: str) -> Side:
    try:
        return Side.parse(name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _sides_option(name: str) -> tuple[str, ...]:
    normalized = str(name).strip().lower()
    if normalized == "both":
        return ("left", "right")
    return (_parse_side(normalized).value,)


def _load_seeds(seeds_file: Path | None) -> tuple[int, ...]:
    if seeds_file is None:
        return analyze().reset_loop.seeds
    try:
        return seedfile.load(seeds_file).seeds
    except (OSError, SeedFileError) as exc:
        typer.echo(f"failed to load seeds from {seeds_file}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _load_background(path: Path | None) -> Image.Image | None:
    if path is None:
        return None
    if not path.is_file():
        typer.echo(f"background image not found: {path}", err=True)
        raise typer.Exit(code=1)
    return Image.open(path)


@app.command("simulate")
def cmd_simulate(
    seed: int = typer.Option(..., "--seed", parser=_int_literal, help="RNG seed (e.g. 0x0000)"),
    phase: int = typer.Option(..., "--phase", parser=_int_literal, help="starting global timer (0..0xFF)"),
    side: str = typer.Option(..., "--side", help="left|right"),
    x: int = typer.Option(..., "--x", parser=_int_literal, help="target x"),
    y: int = typer.Option(0x1C9, "--y", parser=_int_literal, help="target y"),
) -> None:
    """Run one encounter and print whether a goop connects."""
    hit = run_trial(seed & 0xFFFF, phase & 0xFF, _parse_side(side), Target(x, y))
    typer.echo("hit" if hit else "miss")


@app.command("seeds")
def cmd_seeds(
    out: Path,
    loops: int = typer.Option(5, help="number of loops to summarize"),
) -> None:
    """Analyze RNG loops and write the reset loop's seeds to a seed file."""
    report = analyze()
    typer.echo(f"reset seed 0x{report.reset_seed:04x}: {len(report.loops)} loop(s)")
    for idx, loop in enumerate(report.loops[: max(0, loops)]):
        typer.echo(f"  loop {idx}: len={len(loop)} tail={loop.tail_count} first=0x{loop.seeds[0]:04x}")
    out.parent.mkdir(parents=True, exist_ok=True)
    seedfile.dump(out, report.reset_seed, report.reset_loop.seeds)
    typer.echo(f"wrote {len(report.reset_loop)} seeds to {out}")


@app.command("sweep")
def cmd_sweep(
    seeds_file: Path | None = typer.Option(None, "--seeds-file", help="seed file from `draygon seeds` (default: analyze now)"),
    config_file: Path | None = typer.Option(None, "--config", help="JSON sweep config"),
    side: str | None = typer.Option(None, "--side", help="left|right|both"),
    x_min: int | None = typer.Option(None, "--x-min", parser=_int_literal, help="first target x"),
    x_max: int | None = typer.Option(None, "--x-max", parser=_int_literal, help="last target x (inclusive)"),
    x_step: int | None = typer.Option(None, "--x-step", parser=_int_literal, help="target x step"),
    y: int | None = typer.Option(None, "--y", parser=_int_literal, help="target y"),
    phases: int | None = typer.Option(None, "--phases", parser=_int_literal, help="global timer phases per seed"),
    workers: int | None = typer.Option(None, "--workers", help="worker processes (0 = per CPU, 1 = in-process)"),
    seed_limit: int | None = typer.Option(None, "--seed-limit", min=1, help="only use the first N seeds"),
    json_out: Path | None = typer.Option(None, "--json-out", help="write the result table as JSON"),
    overlay_out: Path | None = typer.Option(None, "--overlay-out", help="write a probability overlay PNG"),
    background: Path | None = typer.Option(None, "--background", help="room image to draw the overlay on"),
    trace_log: Path | None = typer.Option(None, "--trace-log", help="append sweep trace events to this file"),
) -> None:
    """Sweep target x positions and print hit probabilities."""
    try:
        config = load_sweep_config(config_file) if config_file is not None else SweepConfig()
    except OSError as exc:
        typer.echo(f"failed to read config {config_file}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except SweepConfigError as exc:
        typer.echo(f"invalid config: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    overrides: dict[str, object] = {}
    if side is not None:
        overrides["sides"] = _sides_option(side)
    if x_min is not None:
        overrides["x_min"] = x_min
    if x_max is not None:
        overrides["x_max"] = x_max
    if x_step is not None:
        overrides["x_step"] = x_step
    if y is not None:
        overrides["target_y"] = y
    if phases is not None:
        overrides["phases"] = phases
    if workers is not None:
        overrides["workers"] = workers
    config = msgspec.structs.replace(config, **overrides)
    try:
        config.validate()
    except SweepConfigError as exc:
        typer.echo(f"invalid config: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    backdrop = _load_background(background)
    seeds = _load_seeds(seeds_file)
    if seed_limit is not None:
        seeds = seeds[:seed_limit]
    if not seeds:
        typer.echo("no seeds to sweep", err=True)
        raise typer.Exit(code=1)

    if trace_log is not None:
        init_sweep_trace(trace_log, command="sweep", seeds_file=seeds_file or "reset-loop", seeds=len(seeds))

    current_side: list[str] = []

    def _print_row(row: SweepRow) -> None:
        if not current_side or current_side[-1] != row.side:
            current_side.append(row.side)
            typer.echo(side_header(row.side))
        typer.echo(format_row(row))

    table = run_sweep(seeds, config, on_row=_print_row)

    if json_out is not None:
        json_out.parent.mkdir(parents=True, exist_ok=True)
        json_out.write_bytes(encode_table(table))
        typer.echo(f"wrote {json_out}")
    if overlay_out is not None:
        overlay_out.parent.mkdir(parents=True, exist_ok=True)
        render_overlay(table, background=backdrop).save(overlay_out)
        typer.echo(f"wrote {overlay_out}")


@app.command("overlay")
def cmd_overlay(
    table_file: Path,
    out: Path,
    background: Path | None = typer.Option(None, "--background", help="room image to draw the overlay on"),
    y: int | None = typer.Option(None, "--y", parser=_int_literal, help="draw bands around this y (default: the table's target y)"),
    band: int = typer.Option(0x10, "--band", parser=_int_literal, help="band height in pixels"),
    raw: bool = typer.Option(False, "--raw", help="color by absolute probability instead of the table peak"),
) -> None:
    """Render a probability overlay from a saved JSON table."""
    if not table_file.is_file():
        typer.echo(f"table not found: {table_file}", err=True)
        raise typer.Exit(code=1)
    try:
        table = decode_table(table_file.read_bytes())
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        typer.echo(f"invalid table {table_file}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    image = render_overlay(
        table,
        background=_load_background(background),
        target_y=y,
        band_height=band,
        normalize=not raw,
    )
    out.parent.mkdir(parents=True, exist_ok=True)
    image.save(out)
    typer.echo(f"wrote {out}")


def main(argv: list[str] | None = None) -> None:
    app(prog_name="draygon", args=argv)


if __name__ == "__main__":
    main()
