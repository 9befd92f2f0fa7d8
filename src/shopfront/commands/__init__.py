"""Subcommand modules for shopfront.

Provides register_commands() which uses deferred imports to keep
``shopfront --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the basket group and the standalone commands on the root group."""
    # --- Groups ---
    from shopfront.commands.basket import basket

    cli.add_command(basket)

    # --- Standalone commands ---
    from shopfront.commands.catalog import catalog, show
    from shopfront.commands.checkout import checkout
    from shopfront.commands.page import page

    cli.add_command(catalog)
    cli.add_command(show)
    cli.add_command(checkout)
    cli.add_command(page)
