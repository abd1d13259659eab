"""spatial-gestures CLI.

Usage:
    spatial-gestures replay session.json --config gestures.yml
    spatial-gestures config-show --config gestures.yml
    spatial-gestures config-check gestures.yml
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
import yaml

from spatial_gestures.config import GestureConfig
from spatial_gestures.engine import GestureEngine
from spatial_gestures.errors import ConfigurationError, RecordingError
from spatial_gestures.events import GestureEvent, GestureKind
from spatial_gestures.recorder import PosePlayer

app = typer.Typer(
    name="spatial-gestures",
    help="🤚 Hand-pose gesture recognition for spatial UIs.",
    add_completion=False,
)


def _load_config(path: Optional[str]) -> GestureConfig:
    if path is None:
        return GestureConfig()
    if not Path(path).exists():
        typer.echo(f"❌ Config not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return GestureConfig.from_yaml(path)
    except (ConfigurationError, yaml.YAMLError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)


def _describe(event: GestureEvent) -> str:
    if event.kind is GestureKind.ZOOM_DELTA:
        return f"zoom {event.delta:+.3f}"
    if event.kind is GestureKind.FFT_REQUEST:
        return f"FFT request (channel {event.channel})"
    if event.kind is GestureKind.FINGER_COUNT_CHANGED:
        return f"finger count {event.count}"
    return event.kind.value.replace("_", " ")


@app.command()
def replay(
    recording: str = typer.Argument(..., help="Path to a pose recording (.json)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Gesture config YAML"),
    channel: Optional[int] = typer.Option(None, help="Override the active FFT channel"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print the summary"),
    log_level: str = typer.Option("warning", help="Log level"),
):
    """Replay a recorded pose session through the gesture engine."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    path = Path(recording)
    if not path.exists():
        typer.echo(f"❌ Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    cfg = _load_config(config)
    if channel is not None:
        try:
            cfg = cfg.replace(active_channel=channel)
        except ConfigurationError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(1)

    try:
        player = PosePlayer.load(path)
    except RecordingError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"▶️  Replaying {path.name} ({player.frame_count} frames, {player.duration:.1f}s)")

    counts: Counter = Counter()

    def on_event(event: GestureEvent):
        counts[event.kind.value] += 1
        if not quiet:
            typer.echo(f"   {event.timestamp:8.3f}s  {_describe(event)}")

    with GestureEngine(cfg, subscribers=[on_event]) as engine:
        for frame in player.play():
            engine.tick(frame)
        stats = engine.stats

    typer.echo(f"\n✅ Replay complete. {sum(counts.values())} events over {stats.ticks} ticks.")
    for kind in GestureKind:
        if counts[kind.value]:
            typer.echo(f"   {kind.value:22s} {counts[kind.value]}")


@app.command("config-show")
def config_show(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Gesture config YAML"),
):
    """Print the effective gesture configuration as YAML."""
    cfg = _load_config(config)
    typer.echo(yaml.dump({"gestures": cfg.to_dict()}, default_flow_style=False, sort_keys=False))


@app.command("config-check")
def config_check(
    path: str = typer.Argument(..., help="Gesture config YAML to validate"),
):
    """Validate a gesture configuration file."""
    _load_config(path)
    typer.echo(f"✅ {path} is a valid gesture configuration")


def main():
    app()


if __name__ == "__main__":
    main()
