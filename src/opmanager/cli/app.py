"""
Root Typer application for the op-manager CLI.

    opmanager --version
    opmanager events [--json]
    opmanager demo [--json]
"""

from __future__ import annotations

import typer
from pydantic import ValidationError
from typer import Typer

from opmanager.cli.utils import console, err_console, output_rows
from opmanager.core.settings import configure_from_settings, get_settings
from opmanager.lifecycle.enums import LifecycleEvent

app = Typer(
    name="opmanager",
    help="op-manager — admission-controlled operation lifecycles.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_EVENT_PAYLOADS = {
    LifecycleEvent.ACCEPT: ("op", "()"),
    LifecycleEvent.REFUSE: ("op, reason", "(reason)"),
    LifecycleEvent.RUN: ("op", "()"),
    LifecycleEvent.DONE: ("op, *result", "(*result)"),
    LifecycleEvent.RELEASE: ("op", "()"),
}


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from opmanager import __version__

        try:
            v = pkg_version("op-manager")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"op-manager {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """op-manager CLI — inspect the lifecycle vocabulary and run the demo."""
    try:
        configure_from_settings(get_settings())
    except ValidationError as e:
        err_console.print(f"[bold red]Invalid OPMANAGER_* settings:[/bold red] {e}")
        raise typer.Exit(code=2) from e


@app.command("events")
def events(
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the lifecycle events and their payloads."""
    rows = [
        {
            "event": event.value,
            "manager_payload": _EVENT_PAYLOADS[event][0],
            "operation_payload": _EVENT_PAYLOADS[event][1],
            "meaning": event.description,
        }
        for event in LifecycleEvent
    ]
    output_rows(rows, as_json=json_out, title="Lifecycle events")


@app.command("demo")
def demo(
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Run the exclusive-policy walk-through and print the manager's events."""
    from opmanager.cli.demo import run_demo

    rows = run_demo()
    output_rows(rows, as_json=json_out, title="ExclusiveManager trace")
    if not json_out:
        console.print("[dim]A2 is refused while the exclusive B1 is still running.[/dim]")


if __name__ == "__main__":  # pragma: no cover
    app()
