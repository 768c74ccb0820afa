"""Cloud commands: connect, sync."""

from __future__ import annotations

import click

from ._common import MEALCRAFT_HOME, console, open_runtime, run_async


def register_cloud_commands(main: click.Group) -> None:
    """Register the cloud command group."""

    @main.group()
    def cloud():
        """Cloud account: keep kitchen data on the remote service.

        Once connected, every read and write goes to the account.
        There is no automatic fallback to this device.
        """

    @cloud.command("connect")
    @click.argument("user_id")
    @click.option("--home", default=MEALCRAFT_HOME, type=click.Path(), help="Data home directory.")
    def cloud_connect(user_id: str, home: str):
        """Remember USER_ID and switch storage to its cloud account."""
        runtime = open_runtime(home)
        try:
            runtime.selector.switch_to_cloud(user_id)
        except ValueError as exc:
            console.print(f"[red]{exc}[/]")
            raise SystemExit(1)
        console.print(f"[green]Cloud storage active for[/] [bold]{user_id}[/]")

    @cloud.command("sync")
    @click.option("--home", default=MEALCRAFT_HOME, type=click.Path(), help="Data home directory.")
    def cloud_sync(home: str):
        """Reconcile this device with the cloud account."""
        runtime = open_runtime(home)
        if not runtime.selector.is_cloud_mode:
            console.print("[yellow]Local mode: nothing to sync.[/]")
            return
        run_async(runtime, lambda rt: rt.selector.sync())
        console.print("[green]Sync complete.[/]")
