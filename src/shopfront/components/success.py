"""Order confirmation dialog."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from shopfront.components.base import Component
from shopfront.components.card import CURRENCY

if TYPE_CHECKING:
    from shopfront.components.view import ViewEvent, ViewNode


class Success(Component):
    """Field: ``total``. The close button runs *on_close*."""

    def __init__(
        self,
        container: ViewNode,
        on_close: Callable[[ViewEvent], None] | None = None,
    ) -> None:
        super().__init__(container)
        self._description = container.ensure(".order-success__description")
        self._close = container.find(".order-success__close")
        if on_close is not None and self._close is not None:
            self._close.add_listener("click", on_close)

        self.fields.bind("total", self._set_total)

    def _set_total(self, value: int) -> None:
        self.set_text(self._description, f"Charged {value} {CURRENCY}")
