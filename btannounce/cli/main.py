"""Command line interface for btannounce.

Announces every torrent file given on the command line and prints the peers
each tracker returned.
"""

from __future__ import annotations

import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from btannounce.config.config import ConfigManager
from btannounce.models import AnnounceStatus, ClientReport, LogLevel
from btannounce.session.orchestrator import run
from btannounce.utils.exceptions import ConfigurationError

STATUS_STYLES = {
    AnnounceStatus.OK: "green",
    AnnounceStatus.DECLINED: "yellow",
    AnnounceStatus.UNREACHABLE: "red",
    AnnounceStatus.MALFORMED: "red",
    AnnounceStatus.UNSUPPORTED: "dim",
}


def _build_overrides(port: int | None, log_level: str | None) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if port is not None:
        overrides.setdefault("network", {})["listen_port"] = port
    if log_level is not None:
        overrides.setdefault("observability", {})["log_level"] = log_level.upper()
    return overrides


def _print_report(console: Console, report: ClientReport) -> None:
    if not report.ok:
        console.print(f"[red]✗[/red] {report.path}: {report.error}")
        return

    console.print(
        f"[bold]{report.name}[/bold] [dim]{report.info_hash_hex}[/dim] ({report.path})",
    )
    if not report.results:
        console.print("  [dim]no trackers listed[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Tracker")
    table.add_column("Status")
    table.add_column("Peers", justify="right")
    table.add_column("Detail")
    for result in report.results:
        style = STATUS_STYLES[result.status]
        table.add_row(
            result.url,
            f"[{style}]{result.status.value}[/{style}]",
            str(len(result.peers)),
            result.error or result.warning_message or "",
        )
    console.print(table)

    peers = report.peers
    if peers:
        console.print(f"  {len(peers)} unique peers: " + ", ".join(str(p) for p in peers))


@click.command()
@click.argument(
    "torrents",
    nargs=-1,
    required=True,
    type=click.Path(dir_okay=False),
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a TOML configuration file",
)
@click.option("--port", type=click.IntRange(0, 65535), help="Port advertised to trackers")
@click.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    help="Logging level",
)
@click.option("--json", "as_json", is_flag=True, help="Print reports as JSON")
def main(
    torrents: tuple[str, ...],
    config_file: str | None,
    port: int | None,
    log_level: str | None,
    as_json: bool,
) -> None:
    """Announce TORRENTS to their trackers and list the peers returned."""
    try:
        manager = ConfigManager(config_file, _build_overrides(port, log_level))
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    manager.setup_logging()

    reports = run(list(torrents), manager.config)

    if as_json:
        click.echo(
            json.dumps(
                [r.model_dump(mode="json") for r in reports],
                indent=2,
            )
        )
    else:
        console = Console()
        for report in reports:
            _print_report(console, report)

    if not all(r.ok for r in reports):
        raise click.exceptions.Exit(1)
