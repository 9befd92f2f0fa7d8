"""Form component — turns input and submit interactions into broker events.

Every input change on a named field emits ``<form>.<field>:change`` with
``{"field": ..., "value": ...}``; submission emits ``<form>:submit``.
``valid`` and ``errors`` are driven from outside by the validation
results DomainState emits; forms never validate themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shopfront.components.base import Component
from shopfront.domain.events import field_change, form_submit

if TYPE_CHECKING:
    from shopfront.components.view import ViewEvent, ViewNode
    from shopfront.events.broker import EventBroker

ERROR_SEPARATOR = "; "


class Form(Component):
    """Base form. Fields: ``valid``, ``errors``."""

    def __init__(self, container: ViewNode, broker: EventBroker, name: str) -> None:
        super().__init__(container)
        self.name = name
        self._broker = broker
        self._submit = container.find("button[type=submit]")
        self._errors = container.find(".form__errors")

        container.add_listener("input", self._on_input)
        container.add_listener("submit", self._on_submit)
        if self._submit is not None:
            self._submit.add_listener("click", lambda _event: self.submit())

        self.fields.bind("valid", self._set_valid)
        self.fields.bind("errors", self._set_errors)

    @property
    def submit_button(self) -> ViewNode | None:
        return self._submit

    def input(self, field: str) -> ViewNode | None:
        return self.container.find(f"input[name={field}]")

    def submit(self) -> None:
        """Submit unless the submit control is disabled."""
        if self._submit is not None and self._submit.disabled:
            return
        self.container.dispatch("submit")

    def _on_input(self, event: ViewEvent) -> None:
        target = event.target
        field = target.attrs.get("name")
        if not field:
            return
        self.on_input_change(str(field), target.value)

    def on_input_change(self, field: str, value: str) -> None:
        self._broker.emit(field_change(self.name, field), {"field": field, "value": value})

    def _on_submit(self, _event: ViewEvent) -> None:
        self._broker.emit(form_submit(self.name))

    def _set_valid(self, value: bool) -> None:
        self.set_disabled(self._submit, not value)

    def _set_errors(self, value: str | list[str]) -> None:
        if isinstance(value, list):
            value = ERROR_SEPARATOR.join(m for m in value if m)
        self.set_text(self._errors, value)

    def _set_input(self, field: str, value: str) -> None:
        node = self.input(field)
        if node is not None:
            node.value = value


def type_into(form: Form, field: str, value: str) -> None:
    """Simulate a user typing *value* into *field* of *form*."""
    node = form.input(field)
    if node is None:
        raise LookupError(f"Form '{form.name}' has no input named '{field}'")
    node.value = value
    node.dispatch("input")
