"""
MealCraft CLI -- manage kitchen data from the command line.

Each command group lives in its own module and is registered on the
main Click group here.

Entry point: mealcraft.cli:main
"""

from __future__ import annotations

import logging

import click

from .. import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mealcraft")
@click.option("--verbose", "-v", is_flag=True, help="Log storage activity to stderr.")
def main(verbose: bool):
    """MealCraft: recipes, stock and planning, on this device or in the cloud."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Register all command groups/commands from modular files
# ---------------------------------------------------------------------------

from .data import register_data_commands
from .cloud import register_cloud_commands
from .validate import register_validate_commands

register_data_commands(main)
register_cloud_commands(main)
register_validate_commands(main)
