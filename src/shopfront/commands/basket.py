"""Command group: inspect and change the persisted basket."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shopfront.commands._base import ShopGroup

if TYPE_CHECKING:
    from shopfront.commands._context import AppContext

_BASKET_EXAMPLES = """\
  shopfront basket show
  shopfront basket add 854cef69-976d-4c2a-a18c-2aa45046c390
  shopfront basket remove 854cef69-976d-4c2a-a18c-2aa45046c390
  shopfront basket clear
  shopfront --json basket show"""


@click.group(cls=ShopGroup, examples=_BASKET_EXAMPLES)
@click.pass_obj
def basket(app: AppContext) -> None:
    """Show, add to, remove from, or clear the basket."""


@basket.command(name="show", examples="shopfront basket show\nshopfront -q basket show")
@click.pass_obj
def show_basket(app: AppContext) -> None:
    """Show basket rows and the running total."""
    app.emit(app.run(lambda svc: svc.basket()))


@basket.command(examples="shopfront basket add 854cef69-976d-4c2a-a18c-2aa45046c390")
@click.argument("product_id")
@click.pass_obj
def add(app: AppContext, product_id: str) -> None:
    """Add a product to the basket (priceless products cannot be added)."""
    app.emit(app.run(lambda svc: svc.add(product_id)))


@basket.command(examples="shopfront basket remove 854cef69-976d-4c2a-a18c-2aa45046c390")
@click.argument("product_id")
@click.pass_obj
def remove(app: AppContext, product_id: str) -> None:
    """Remove a product from the basket."""
    app.emit(app.run(lambda svc: svc.remove(product_id)))


@basket.command(examples="shopfront basket clear")
@click.pass_obj
def clear(app: AppContext) -> None:
    """Empty the basket."""
    app.emit(app.run(lambda svc: svc.clear()))
