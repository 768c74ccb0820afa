"""Shared utilities for all CLI command modules.

Provides the Rich console, the runtime factory, and the helper that
drives async storage calls from synchronous Click commands.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

from rich.console import Console

from .. import MEALCRAFT_HOME
from ..runtime import KitchenRuntime, get_runtime
from ..storage.errors import PersistenceError

console = Console()
logger = logging.getLogger("mealcraft.cli")

T = TypeVar("T")


def open_runtime(home: str) -> KitchenRuntime:
    """Start a runtime for the ``--home`` option value.

    An unreadable store is printed and ends the command with exit code 1.
    """
    try:
        return get_runtime(Path(home).expanduser())
    except PersistenceError as exc:
        console.print(f"[bold red]{type(exc).__name__}:[/] {exc}")
        raise SystemExit(1)


def run_async(
    runtime: KitchenRuntime, action: Callable[[KitchenRuntime], Awaitable[T]]
) -> T:
    """Run ``action(runtime)`` to completion, then close the transport.

    Persistence failures are printed and end the command with exit code 1.
    """

    async def _runner() -> T:
        try:
            return await action(runtime)
        finally:
            await runtime.close()

    try:
        return asyncio.run(_runner())
    except PersistenceError as exc:
        console.print(f"[bold red]{type(exc).__name__}:[/] {exc}")
        raise SystemExit(1)


def describe(value: Any) -> str:
    """Short human summary of a stored value."""
    if value is None:
        return "[dim]empty[/]"
    if isinstance(value, (list, dict)):
        return f"{len(value)} entries"
    return repr(value)


__all__ = ["MEALCRAFT_HOME", "console", "describe", "logger", "open_runtime", "run_async"]
