"""Page shell — basket counter, catalog gallery, scroll lock."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shopfront.components.base import Component
from shopfront.domain.events import Events

if TYPE_CHECKING:
    from shopfront.components.view import ViewNode
    from shopfront.events.broker import EventBroker

LOCKED_CLASS = "page__wrapper_locked"


class Page(Component):
    """Top-level page: ``counter``, ``catalog`` and ``locked`` fields."""

    def __init__(self, container: ViewNode, broker: EventBroker) -> None:
        super().__init__(container)
        self._counter = container.ensure(".header__basket-counter")
        self._gallery = container.ensure(".gallery")
        self._wrapper = container.ensure(".page__wrapper")
        self._basket = container.ensure(".header__basket")

        self._basket.add_listener("click", broker.trigger(Events.BASKET_OPEN))

        self.fields.bind("counter", self._set_counter)
        self.fields.bind("catalog", self._set_catalog)
        self.fields.bind("locked", self._set_locked)

    @property
    def gallery(self) -> ViewNode:
        return self._gallery

    def _set_counter(self, value: int) -> None:
        self.set_text(self._counter, value)

    def _set_catalog(self, items: list[ViewNode]) -> None:
        self._gallery.replace_children(list(items))

    def _set_locked(self, value: bool) -> None:
        self.toggle_class(self._wrapper, LOCKED_CLASS, bool(value))
