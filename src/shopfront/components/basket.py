"""Basket view — rows, total, and the checkout button."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shopfront.components.base import Component
from shopfront.components.card import CURRENCY
from shopfront.components.view import ViewNode
from shopfront.domain.events import Events

if TYPE_CHECKING:
    from shopfront.events.broker import EventBroker

EMPTY_LABEL = "Basket is empty"


class Basket(Component):
    """Fields: ``items`` (row nodes), ``total``, ``selected`` (basket ids)."""

    def __init__(self, container: ViewNode, broker: EventBroker) -> None:
        super().__init__(container)
        self._list = container.ensure(".basket__list")
        self._total = container.find(".basket__price")
        self._button = container.find(".basket__button")

        if self._button is not None:
            self._button.add_listener("click", broker.trigger(Events.ORDER_OPEN))

        self.fields.bind("items", self._set_items)
        self.fields.bind("total", self._set_total)
        self.fields.bind("selected", self._set_selected)
        self._set_items([])
        self._set_selected([])

    @property
    def checkout_button(self) -> ViewNode | None:
        return self._button

    def _set_items(self, items: list[ViewNode]) -> None:
        if items:
            self._list.replace_children(list(items))
        else:
            self._list.replace_children([ViewNode("p", classes="basket__empty", text=EMPTY_LABEL)])

    def _set_total(self, value: int) -> None:
        self.set_text(self._total, f"{value or 0} {CURRENCY}")

    def _set_selected(self, ids: list[str]) -> None:
        self.set_disabled(self._button, not ids)
