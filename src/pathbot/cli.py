from __future__ import annotations

import warnings
from pathlib import Path

import msgspec
import typer

from .config import BotConfig, ConfigError, dump_config, load_config
from .host import HostBridge, create_host_bridge

app = typer.Typer(add_completion=False)


def _load_config_or_exit(config_file: Path | None, base_dir: Path | None) -> BotConfig:
    try:
        config = load_config(config_file)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    if base_dir is not None:
        config = msgspec.structs.replace(config, base_dir=str(base_dir))
    return config


def _echo_notifications(bridge: HostBridge) -> None:
    for message in bridge.notifications.drain():
        typer.echo(message)


@app.command("inspect")
def cmd_inspect(
    save_file: Path = typer.Argument(..., help="save file path"),
) -> None:
    """Print best progress and the recorded actions of a save file."""
    from .save import LegacySaveFormatWarning, MissingSaveFileError, SaveCodecError, load_save_file
    from .status import format_action
    from .timeline import Action

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", LegacySaveFormatWarning)
            data = load_save_file(save_file)
    except (MissingSaveFileError, SaveCodecError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    fmt = "legacy" if data.is_legacy else f"v{int(data.v)}"
    typer.echo(f"format={fmt} best={float(data.best):.2f} actions={len(data.actions)}")
    for idx, saved in enumerate(data.actions):
        typer.echo(format_action(idx, Action(position=float(saved.x), kind=saved.t)))


@app.command("migrate")
def cmd_migrate(
    src: Path = typer.Argument(..., help="existing save file"),
    dst: Path = typer.Argument(..., help="output save file"),
    legacy: bool = typer.Option(False, "--legacy", help="write the unversioned marker layout"),
) -> None:
    """Rewrite a save in the current (or legacy) format."""
    from .save import LegacySaveFormatWarning, MissingSaveFileError, SaveCodecError, dump_save_file, load_save_file

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", LegacySaveFormatWarning)
            data = load_save_file(src)
    except (MissingSaveFileError, SaveCodecError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    dump_save_file(dst, data, legacy=legacy)
    typer.echo(f"wrote {len(data.actions)} actions to {dst}")


@app.command("train")
def cmd_train(
    course_file: Path = typer.Argument(..., help="course description (.json)"),
    attempts: int = typer.Option(500, "--attempts", min=1, help="maximum attempts before giving up"),
    out: Path | None = typer.Option(None, "--out", help="save path (default: <base-dir>/<save_name>)"),
    config_file: Path | None = typer.Option(None, "--config", help="config file (default: <runtime-dir>/pathbot.json)"),
    base_dir: Path | None = typer.Option(None, "--base-dir", help="runtime directory override"),
) -> None:
    """Learn a timeline for a scripted course and save it."""
    from .course import CourseError, ScriptedCourse, load_course, train_course
    from .status import format_status

    config = _load_config_or_exit(config_file, base_dir)
    try:
        course = ScriptedCourse(load_course(course_file))
    except CourseError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    bridge = create_host_bridge(course, config=config)
    summary = train_course(course, bridge, max_attempts=attempts)
    bridge.stop()
    ok = bridge.save(out)
    _echo_notifications(bridge)
    bridge.notifications.flush()
    for line in format_status(bridge.status()):
        typer.echo(line)
    if not ok:
        raise typer.Exit(code=1)
    if not summary.completed:
        typer.echo(f"course not cleared after {summary.attempts} attempts", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"course cleared after {summary.attempts} attempts")


@app.command("play")
def cmd_play(
    course_file: Path = typer.Argument(..., help="course description (.json)"),
    save_file: Path = typer.Argument(..., help="save file to replay"),
    config_file: Path | None = typer.Option(None, "--config", help="config file (default: <runtime-dir>/pathbot.json)"),
) -> None:
    """Replay a saved timeline against a scripted course."""
    from .course import CourseError, ScriptedCourse, load_course, play_course

    config = _load_config_or_exit(config_file, None)
    try:
        course = ScriptedCourse(load_course(course_file))
    except CourseError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    bridge = create_host_bridge(course, config=config)
    if not bridge.load(save_file):
        _echo_notifications(bridge)
        raise typer.Exit(code=1)
    summary = play_course(course, bridge)
    _echo_notifications(bridge)
    last = summary.last
    if last is None:
        raise typer.Exit(code=1)
    if not last.completed:
        typer.echo(f"died at x={float(last.death_position or 0.0):.2f} after {last.ticks} ticks", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"cleared in {last.ticks} ticks with {len(last.presses)} presses")


@app.command("config-dump")
def cmd_config_dump(
    config_file: Path | None = typer.Option(None, "--config", help="config file (default: <runtime-dir>/pathbot.json)"),
) -> None:
    """Print the effective configuration as JSON."""
    config = _load_config_or_exit(config_file, None)
    typer.echo(dump_config(config).decode("utf-8"))


def main(argv: list[str] | None = None) -> None:
    app(prog_name="pathbot", args=argv)


if __name__ == "__main__":
    main()
