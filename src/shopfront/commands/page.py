"""Command: print the rendered page tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shopfront.commands._base import ShopCommand

if TYPE_CHECKING:
    from shopfront.commands._context import AppContext


@click.command(
    cls=ShopCommand,
    examples="shopfront page\nshopfront --json page",
)
@click.pass_obj
def page(app: AppContext) -> None:
    """Render the storefront page as a tree."""
    app.emit(app.run(lambda svc: svc.page()))
