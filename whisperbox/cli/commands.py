"""CLI commands for whisperbox.

Top-level ``read`` polls a topic set once; the ``identity`` group wraps the
identity RPC methods.
"""

from __future__ import annotations

import json
import signal
import threading
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from whisperbox import __logo__, __version__
from whisperbox.cli.command_groups.identity_command import register_identity_commands
from whisperbox.cli.shared.logging_utils import configure_stderr_logging, ensure_rotating_log_file
from whisperbox.client import WhisperClient
from whisperbox.config.loader import get_config
from whisperbox.reader.poller import ReadExit
from whisperbox.rpc.params import hex_topics
from whisperbox.rpc.protocol import WhisperResult
from whisperbox.utils.exceptions import WhisperBoxError

app = typer.Typer(
    name="whisperbox",
    help=f"{__logo__} whisperbox - read messages from a Whisper node",
    no_args_is_help=True,
)

console = Console()
_config_path: Path | None = None


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} whisperbox v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Path = typer.Option(None, "--config", "-c", help="Path to config.json"),
    log_level: str = typer.Option(None, "--log-level", help="Override logging.level from config"),
    version: bool = typer.Option(None, "--version", callback=_version_callback, is_eager=True),
) -> None:
    """whisperbox - read messages from a Whisper node."""
    global _config_path
    _config_path = config
    cfg = get_config(config_path=config)
    level = (log_level or cfg.logging.level).upper()
    configure_stderr_logging(level)
    if cfg.logging.log_to_file:
        ensure_rotating_log_file("whisperbox", level=level)


def _make_client(url: str | None) -> WhisperClient:
    cfg = get_config(config_path=_config_path)
    return WhisperClient.from_url(url or cfg.rpc.url, request_timeout=cfg.rpc.request_timeout_seconds)


def _report_error(exc: WhisperBoxError) -> None:
    status = exc.details.get("status_code")
    status_suffix = f", status={status}" if status is not None else ""
    console.print(f"[red]Error:[/red] {exc.code}{status_suffix}: {exc.message}")


def _result_to_dict(result: WhisperResult) -> dict:
    return {
        "hash": result.hash,
        "ttl": result.ttl,
        "sent": result.sent,
        "from": result.sender,
        "to": result.recipient,
        "payload": result.payload.decode("utf-8", errors="replace"),
    }


def _print_results(results: list[WhisperResult]) -> None:
    table = Table(title=f"{len(results)} message(s)")
    table.add_column("Hash", style="dim")
    table.add_column("Sent")
    table.add_column("TTL")
    table.add_column("From", style="cyan")
    table.add_column("Payload")
    for r in results:
        row = _result_to_dict(r)
        table.add_row(row["hash"], str(row["sent"]), str(row["ttl"]), row["from"], row["payload"])
    console.print(table)


@app.command()
def read(
    topics: list[str] = typer.Argument(None, help="Topics to subscribe to (defaults to reader.topics)"),
    url: str = typer.Option(None, "--url", help="Whisper node RPC URL (defaults to config)"),
    interval: float = typer.Option(None, "--interval", "-i", help="Seconds between polls"),
    timeout: int = typer.Option(None, "--timeout", "-t", help="Overall read timeout in seconds; -1 blocks"),
    raw_topics: bool = typer.Option(False, "--raw-topics", help="Send topics as given instead of hex-encoding them"),
    as_json: bool = typer.Option(False, "--json", help="Print one JSON object per message"),
) -> None:
    """Poll the node until messages arrive on TOPICS or the timeout passes."""
    cfg = get_config(config_path=_config_path)
    topics = list(topics or cfg.reader.topics)
    if not topics:
        raise typer.BadParameter("at least one topic is required")
    poll_interval = interval if interval is not None else cfg.reader.poll_interval_seconds
    read_timeout = timeout if timeout is not None else cfg.reader.read_timeout_seconds

    encoded = topics if raw_topics else hex_topics(topics)
    cancel = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda *_: cancel.set())
    try:
        with _make_client(url) as client:
            reader = client.reader(encoded)
            results = reader.read(poll_interval, read_timeout, cancel=cancel)
    except WhisperBoxError as exc:
        _report_error(exc)
        raise typer.Exit(1)
    finally:
        signal.signal(signal.SIGINT, previous)

    if reader.last_exit is ReadExit.CANCELLED:
        console.print("[yellow]Read cancelled[/yellow]")
        return
    if not results:
        console.print("[dim]No messages before timeout[/dim]")
        return
    if as_json:
        for r in results:
            typer.echo(json.dumps(_result_to_dict(r), ensure_ascii=False))
        return
    _print_results(results)


register_identity_commands(app, console, _make_client, _report_error)
