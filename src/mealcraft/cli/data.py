"""Data commands: export, import, show, status."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from ._common import MEALCRAFT_HOME, console, describe, open_runtime, run_async
from ..transfer import LOGICAL_KEYS


def register_data_commands(main: click.Group) -> None:
    """Register export, import, show and status."""

    @main.command("export")
    @click.option("--home", default=MEALCRAFT_HOME, type=click.Path(), help="Data home directory.")
    @click.option("--output", "-o", default=None, type=click.Path(), help="Write the token to this file.")
    def export_cmd(home: str, output: Optional[str]):
        """Export all kitchen data as a single portable token.

        Examples:

            mealcraft export

            mealcraft export -o ~/mealcraft-backup.txt
        """
        runtime = open_runtime(home)

        if output:
            path = run_async(runtime, lambda rt: rt.transfer.export_to_file(Path(output)))
            console.print(Panel(
                f"[bold green]Export written[/]\n"
                f"Source: {runtime.selector.backend.name}\n"
                f"Path: [cyan]{path}[/]",
                title="Export Complete",
                border_style="green",
            ))
            return

        token = run_async(runtime, lambda rt: rt.transfer.export_snapshot())
        click.echo(token)

    @main.command("import")
    @click.argument("token", required=False)
    @click.option("--home", default=MEALCRAFT_HOME, type=click.Path(), help="Data home directory.")
    @click.option("--file", "-f", "token_file", default=None, type=click.Path(), help="Read the token from this file.")
    def import_cmd(token: Optional[str], home: str, token_file: Optional[str]):
        """Restore kitchen data from an export token.

        Examples:

            mealcraft import eyJyZWNldHRlcyI6...

            mealcraft import -f ~/mealcraft-backup.txt
        """
        if not token and not token_file:
            console.print("[red]Give a token or --file.[/]")
            raise SystemExit(1)

        runtime = open_runtime(home)
        if token_file:
            try:
                keys = run_async(
                    runtime, lambda rt: rt.transfer.import_from_file(Path(token_file))
                )
            except FileNotFoundError as exc:
                console.print(f"[red]{exc}[/]")
                raise SystemExit(1)
        else:
            keys = run_async(runtime, lambda rt: rt.transfer.import_snapshot(token))

        console.print(Panel(
            f"[bold green]Import complete[/]\n"
            f"Target: {runtime.selector.backend.name}\n"
            f"Keys: {', '.join(keys) or 'none'}",
            title="Import",
            border_style="green",
        ))

    @main.command("show")
    @click.argument("key", type=click.Choice(LOGICAL_KEYS))
    @click.option("--home", default=MEALCRAFT_HOME, type=click.Path(), help="Data home directory.")
    def show_cmd(key: str, home: str):
        """Print the stored value of KEY as JSON."""
        runtime = open_runtime(home)
        value = run_async(runtime, lambda rt: rt.selector.load(key))
        click.echo(json.dumps(value, indent=2, ensure_ascii=False))

    @main.command("status")
    @click.option("--home", default=MEALCRAFT_HOME, type=click.Path(), help="Data home directory.")
    def status_cmd(home: str):
        """Show which backend is active and what it holds."""
        runtime = open_runtime(home)
        selector = runtime.selector

        async def _collect(rt):
            return {key: await rt.selector.load(key) for key in LOGICAL_KEYS}

        values = run_async(runtime, _collect)

        mode = (
            f"[bold cyan]CLOUD[/] ({selector.user_id})"
            if selector.is_cloud_mode
            else "[bold green]LOCAL[/]"
        )
        console.print(f"\nStorage: {mode}  prefix: {runtime.config.prefix}\n")

        table = Table(title="Kitchen data")
        table.add_column("Key", style="cyan")
        table.add_column("Content")
        for key, value in values.items():
            table.add_row(key, describe(value))
        console.print(table)
