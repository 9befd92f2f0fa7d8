"""First checkout step: payment method and delivery address."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shopfront.components.form import Form
from shopfront.domain.events import ORDER_FORM, Events

if TYPE_CHECKING:
    from shopfront.components.view import ViewNode
    from shopfront.events.broker import EventBroker

ACTIVE_PAYMENT_CLASS = "button_alt-active"


class OrderForm(Form):
    """Fields: ``payment``, ``address``, ``valid``, ``errors``."""

    def __init__(self, container: ViewNode, broker: EventBroker) -> None:
        super().__init__(container, broker, ORDER_FORM)
        buttons = container.ensure(".order__buttons")
        self._buttons = buttons.find_all(".button")
        for button in self._buttons:
            button.add_listener(
                "click",
                broker.trigger(Events.PAYMENT_CHANGE, {"payment": button.attrs["name"]}),
            )

        self.fields.bind("payment", self._set_payment)
        self.fields.bind("address", lambda value: self._set_input("address", value))

    def payment_button(self, name: str) -> ViewNode | None:
        return next((b for b in self._buttons if b.attrs.get("name") == name), None)

    def _set_payment(self, name: str) -> None:
        for button in self._buttons:
            self.toggle_class(button, ACTIVE_PAYMENT_CLASS, button.attrs.get("name") == name)
