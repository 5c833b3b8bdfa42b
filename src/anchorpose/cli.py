"""
Anchorpose CLI - Command-line interface for marker pose aggregation.

Provides commands for replaying recorded marker observations through the
aggregator and validating configuration.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from anchorpose.config.schema import MarkerPositionBehavior
from anchorpose.version import __version__

app = typer.Typer(
    name="anchorpose",
    help="Anchorpose - Consolidate noisy fiducial marker poses.",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Anchorpose[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Anchorpose - Marker observation aggregation."""
    pass


@app.command()
def replay(
    observations: Path = typer.Argument(
        ...,
        help="Path to a recorded observation log (YAML).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file. Defaults are used when omitted.",
    ),
    behavior: Optional[MarkerPositionBehavior] = typer.Option(
        None,
        "--behavior",
        "-b",
        help="Override marker position behavior.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write finalized poses to this YAML file.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override log level (DEBUG, INFO, WARNING, ERROR).",
    ),
    marker_log_level: Optional[str] = typer.Option(
        None,
        "--marker-log-level",
        help="Level for per-marker outlier and rejection reports (e.g. DEBUG).",
    ),
) -> None:
    """Replay recorded observations and print every finalized marker pose."""
    from anchorpose.config.loader import get_default_config, load_config
    from anchorpose.logging.setup import configure_logging
    from anchorpose.logging.telemetry import DetectionTelemetry
    from anchorpose.markers.aggregator import ObservationAggregator
    from anchorpose.markers.replay import load_observation_log, replay as run_replay
    from anchorpose.utils.io import save_yaml

    try:
        cfg = load_config(config) if config else get_default_config()
        if marker_log_level is None and cfg.project.marker_log_level is not None:
            marker_log_level = cfg.project.marker_log_level.value
        configure_logging(
            log_level or cfg.project.log_level.value,
            cfg.project.run_id,
            json_format=cfg.project.json_logs,
            marker_level=marker_log_level,
        )

        frames = load_observation_log(observations)
        telemetry = DetectionTelemetry(window_size=max(len(frames), 1))
        aggregator = ObservationAggregator(cfg.detection, behavior, telemetry)
        updates = run_replay(frames, aggregator)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Replayed {len(frames)} frames from {observations}")
    console.print(f"[green]✓[/green] Behavior: {aggregator.behavior.value}")

    table = Table(title="Finalized Marker Poses")
    table.add_column("Frame", justify="right")
    table.add_column("Marker", justify="right", style="cyan")
    table.add_column("Position (m)")
    table.add_column("Rotation (w, x, y, z)")
    table.add_column("Inliers", justify="right")
    table.add_column("Pos σ (m)", justify="right")
    table.add_column("Rot σ (°)", justify="right")

    finalized = []
    for update in updates:
        for marker_id in sorted(update):
            pose = update[marker_id]
            finalized.append({"frame": update.cycle, **pose.to_dict()})
            table.add_row(
                str(update.cycle),
                str(marker_id),
                ", ".join(f"{v:.4f}" for v in pose.position),
                ", ".join(f"{v:.4f}" for v in pose.rotation),
                f"{pose.inlier_count}/{pose.sample_count}",
                f"{pose.position_std:.5f}",
                f"{pose.rotation_std:.3f}",
            )

    if finalized:
        console.print(table)
    else:
        console.print("[yellow]No marker converged.[/yellow]")

    summary = telemetry.get_summary()
    console.print(
        f"Cycles: {summary['cycles']}  Finalized: {summary['finalized']}  "
        f"Mean cycle latency: {summary['latency']['mean']:.3f} ms"
    )

    if output:
        save_yaml(
            {"behavior": aggregator.behavior.value, "poses": finalized}, output
        )
        console.print(f"[green]✓[/green] Poses written to {output}")


@app.command()
def diagnostics(
    config: Path = typer.Option(
        Path("configs/default.yaml"),
        "--config",
        "-c",
        help="Path to configuration file.",
    ),
) -> None:
    """Validate configuration and show the active detection knobs."""
    from anchorpose.config.loader import load_config

    console.print("[bold]Anchorpose Diagnostics[/bold]\n")

    table = Table(title="Detection Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Anchorpose Version", __version__)

    try:
        cfg = load_config(config)
    except FileNotFoundError:
        table.add_row("Configuration", f"⚠ Not found ({config})")
        console.print(table)
        raise typer.Exit(code=1)
    except Exception as e:
        table.add_row("Configuration", f"✗ Error: {e}")
        console.print(table)
        raise typer.Exit(code=1)

    table.add_row("Configuration", f"✓ Valid ({config})")
    for name, value in cfg.detection.model_dump(mode="json").items():
        table.add_row(name, str(value))

    console.print(table)


@app.command(name="version")
def show_version() -> None:
    """Show version information."""
    console.print(f"[bold blue]Anchorpose[/bold blue] v{__version__}")
    console.print("Marker observation aggregation for spatial tracking.")


if __name__ == "__main__":
    app()
