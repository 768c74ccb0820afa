"""Validate commands: quantity, name, unit, barcode, portions."""

from __future__ import annotations

import click

from ._common import MEALCRAFT_HOME, console
from ..config import load_config
from ..telemetry import CategoryLogger
from ..validation import (
    ValidationResult,
    validate_barcode,
    validate_name,
    validate_portions,
    validate_quantity,
    validate_unit,
)


def _show(result: ValidationResult) -> None:
    """Print a result and exit 1 when it is invalid."""
    for error in result.errors:
        console.print(f"[bold red]ERROR[/] {error}")
    for warning in result.warnings or []:
        console.print(f"[bold yellow]WARN[/]  {warning}")
    if not result.is_valid:
        raise SystemExit(1)
    if not result.warnings:
        console.print("[bold green]OK[/]")


def register_validate_commands(main: click.Group) -> None:
    """Register the validate command group."""

    @main.group()
    @click.option("--home", default=MEALCRAFT_HOME, type=click.Path(), help="Data home directory.")
    @click.pass_context
    def validate(ctx: click.Context, home: str):
        """Check a value against the kitchen data rules before saving it."""
        config = load_config(home)
        ctx.obj = CategoryLogger(level=config.log_level, categories=config.log_categories)

    @validate.command("quantity")
    @click.argument("value")
    @click.pass_obj
    def validate_quantity_cmd(log: CategoryLogger, value: str):
        """Check a quantity such as 2.5 or 250."""
        _show(validate_quantity(value, "cli", log=log))

    @validate.command("name")
    @click.argument("value")
    @click.pass_obj
    def validate_name_cmd(log: CategoryLogger, value: str):
        """Check an ingredient or recipe name."""
        _show(validate_name(value, "cli", log=log))

    @validate.command("unit")
    @click.argument("value")
    @click.pass_obj
    def validate_unit_cmd(log: CategoryLogger, value: str):
        """Check a unit (g, kg, ml, cl, L, càs, càc, pièce, ...)."""
        _show(validate_unit(value, log=log))

    @validate.command("barcode")
    @click.argument("value")
    @click.pass_obj
    def validate_barcode_cmd(log: CategoryLogger, value: str):
        """Check a product barcode."""
        _show(validate_barcode(value, log=log))

    @validate.command("portions")
    @click.argument("value")
    def validate_portions_cmd(value: str):
        """Check a number of portions."""
        _show(validate_portions(value))
