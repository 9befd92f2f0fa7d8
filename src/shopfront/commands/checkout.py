"""Command: fill both checkout steps and place the order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shopfront.commands._base import ShopCommand
from shopfront.domain.types import DEFAULT_PAYMENT, PaymentMethod

if TYPE_CHECKING:
    from shopfront.commands._context import AppContext


@click.command(
    cls=ShopCommand,
    examples="""\
  shopfront checkout --address "Main St 1" --email a@b.io --phone +70000000000
  shopfront checkout --payment cash --address "Main St 1" --email a@b.io --phone 123
  shopfront --json checkout --address "Main St 1" --email a@b.io --phone 123""",
)
@click.option(
    "--payment",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=DEFAULT_PAYMENT.value,
    show_default=True,
    help="Payment method.",
)
@click.option("--address", required=True, help="Delivery address.")
@click.option("--email", required=True, help="Contact email.")
@click.option("--phone", required=True, help="Contact phone (digits, optional leading +).")
@click.pass_obj
def checkout(app: AppContext, payment: str, address: str, email: str, phone: str) -> None:
    """Submit the basket as an order."""
    result = app.run(
        lambda svc: svc.checkout(payment=payment, address=address, email=email, phone=phone)
    )
    app.emit(result)
