"""Second checkout step: email and phone."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shopfront.components.form import Form
from shopfront.domain.events import CONTACTS_FORM

if TYPE_CHECKING:
    from shopfront.components.view import ViewNode
    from shopfront.events.broker import EventBroker


class ContactsForm(Form):
    """Fields: ``email``, ``phone``, ``valid``, ``errors``."""

    def __init__(self, container: ViewNode, broker: EventBroker) -> None:
        super().__init__(container, broker, CONTACTS_FORM)
        self.fields.bind("email", lambda value: self._set_input("email", value))
        self.fields.bind("phone", lambda value: self._set_input("phone", value))
