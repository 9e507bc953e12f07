"""Identity command group: create and verify node identities."""

from __future__ import annotations

from typing import Callable

import typer
from rich.console import Console

from whisperbox.client import WhisperClient
from whisperbox.utils.exceptions import WhisperBoxError


def register_identity_commands(
    app: typer.Typer,
    console: Console,
    make_client: Callable[[str | None], WhisperClient],
    report_error: Callable[[WhisperBoxError], None],
) -> None:
    """Register identity command group."""
    identity_app = typer.Typer(help="Identity: generate a new identity or check an existing one")
    app.add_typer(identity_app, name="identity")

    @identity_app.command("new")
    def identity_new(
        url: str = typer.Option(None, "--url", help="Whisper node RPC URL (defaults to config)"),
    ) -> None:
        """Ask the node to generate a new identity and print it."""
        try:
            with make_client(url) as client:
                identity = client.new_identity()
        except WhisperBoxError as exc:
            report_error(exc)
            raise typer.Exit(1)
        console.print(identity)

    @identity_app.command("check")
    def identity_check(
        identity: str = typer.Argument(..., help="Identity to verify"),
        url: str = typer.Option(None, "--url", help="Whisper node RPC URL (defaults to config)"),
    ) -> None:
        """Check whether the node knows an identity; exits 2 when it does not."""
        try:
            with make_client(url) as client:
                known = client.has_identity(identity)
        except WhisperBoxError as exc:
            report_error(exc)
            raise typer.Exit(1)
        if known:
            console.print("[green]✓[/green] identity is known to the node")
            return
        console.print("[yellow]identity is not known to the node[/yellow]")
        raise typer.Exit(2)
