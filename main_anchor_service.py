"""Mini README: Entry point CLI for the AnchorSync engine.

This script exposes a Typer CLI with two commands: ``run`` serves the
FastAPI perception bridge with uvicorn, and ``replay`` feeds a recorded
JSON event script through a fresh session and prints the resulting
winners and scene. Settings come from ``ANCHORSYNC_`` environment
variables when available.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from anchorsync.configuration import get_settings
from anchorsync.interface import ScriptClock, load_event_script, replay_events
from anchorsync.logging_utils import configure_root_logger
from anchorsync.rendering import REGISTRY
from anchorsync.session import SessionContext, SessionEventDispatcher

cli = typer.Typer(help="Run and inspect the AnchorSync spatial anchor engine.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the perception bridge using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting AnchorSync bridge on {effective_host}:{effective_port}.\n"
        f"Session state: http://{browser_host}:{effective_port}/session"
    )
    uvicorn.run(
        "anchorsync.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def replay(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON event script to replay."),
    renderer: str = typer.Option(None, help="Renderer identifier (defaults to configuration)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print a snapshot after every batch."),
) -> None:
    """Replay a recorded perception event script and print the final state."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        batches = load_event_script(script)
    except ValueError as error:
        typer.echo(f"Invalid event script: {error}", err=True)
        raise typer.Exit(code=1) from error

    clock = ScriptClock()
    scene_renderer = REGISTRY.for_settings(settings, renderer)
    dispatcher = SessionEventDispatcher(SessionContext.create(scene_renderer, settings, clock=clock))
    snapshots = replay_events(batches, dispatcher, clock)

    if verbose:
        for snapshot in snapshots:
            typer.echo(json.dumps(snapshot, indent=2))
    final = snapshots[-1] if snapshots else dispatcher.snapshot()
    typer.echo(f"Winners: {json.dumps(final['winners'])}")
    scene = getattr(scene_renderer, "snapshot", None)
    if callable(scene):
        typer.echo(json.dumps(scene(), indent=2))


if __name__ == "__main__":
    cli()
