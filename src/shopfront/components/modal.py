"""Modal dialog hosting one content view at a time."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shopfront.components.base import Component
from shopfront.domain.events import Events

if TYPE_CHECKING:
    from collections.abc import Mapping

    from shopfront.components.view import ViewNode
    from shopfront.events.broker import EventBroker

ACTIVE_CLASS = "modal_active"


class Modal(Component):
    """Field: ``content`` (a view node). Rendering opens the modal."""

    def __init__(self, container: ViewNode, broker: EventBroker) -> None:
        super().__init__(container)
        self._broker = broker
        self._content = container.ensure(".modal__content")
        self._close = container.find(".modal__close")

        if self._close is not None:
            self._close.add_listener("click", lambda _event: self.close())

        self.fields.bind("content", self._set_content)

    @property
    def content(self) -> ViewNode | None:
        return self._content.children[0] if self._content.children else None

    @property
    def is_open(self) -> bool:
        return self.container.has_class(ACTIVE_CLASS)

    def _set_content(self, value: ViewNode | None) -> None:
        self._content.replace_children([value] if value is not None else [])

    def open(self) -> None:
        self.toggle_class(self.container, ACTIVE_CLASS, True)
        self._broker.emit(Events.MODAL_OPEN)

    def close(self) -> None:
        self.toggle_class(self.container, ACTIVE_CLASS, False)
        self._set_content(None)
        self._broker.emit(Events.MODAL_CLOSE)

    def render(self, data: Mapping[str, Any] | None = None) -> ViewNode:
        super().render(data)
        self.open()
        return self.container
