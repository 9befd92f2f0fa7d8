"""Commands: list the catalog and preview a single product."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shopfront.commands._base import ShopCommand

if TYPE_CHECKING:
    from shopfront.commands._context import AppContext


@click.command(
    cls=ShopCommand,
    examples="""\
  shopfront catalog
  shopfront -v catalog
  shopfront --json catalog
  shopfront -q catalog""",
)
@click.pass_obj
def catalog(app: AppContext) -> None:
    """List every product in the catalog."""
    app.emit(app.run(lambda svc: svc.catalog()))


@click.command(
    cls=ShopCommand,
    examples="""\
  shopfront show 854cef69-976d-4c2a-a18c-2aa45046c390
  shopfront -v show 854cef69-976d-4c2a-a18c-2aa45046c390""",
)
@click.argument("product_id")
@click.pass_obj
def show(app: AppContext, product_id: str) -> None:
    """Open a product in the preview and show its details."""
    app.emit(app.run(lambda svc: svc.show(product_id)))
