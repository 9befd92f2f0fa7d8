"""Tests for Form, OrderForm and ContactsForm."""

from __future__ import annotations

import pytest

from shopfront.components import templates
from shopfront.components.contacts import ContactsForm
from shopfront.components.form import type_into
from shopfront.components.order import ACTIVE_PAYMENT_CLASS, OrderForm
from shopfront.domain.events import FIELD_CHANGE_PATTERN, Events
from shopfront.events.broker import EventBroker
from tests.conftest import record


@pytest.fixture
def order_form(broker: EventBroker) -> OrderForm:
    return OrderForm(templates.order_form(), broker)


@pytest.fixture
def contacts_form(broker: EventBroker) -> ContactsForm:
    return ContactsForm(templates.contacts_form(), broker)


class TestFieldChange:
    def test_input_emits_field_change(self, order_form: OrderForm, broker: EventBroker) -> None:
        rec = record(broker, "order.address:change")
        type_into(order_form, "address", "Main St 1")
        assert rec.payloads("order.address:change") == [{"field": "address", "value": "Main St 1"}]

    def test_contacts_fields_matched_by_pattern(self, contacts_form: ContactsForm, broker: EventBroker) -> None:
        seen: list[dict[str, str]] = []
        broker.subscribe(FIELD_CHANGE_PATTERN, seen.append)
        type_into(contacts_form, "email", "a@b.io")
        type_into(contacts_form, "phone", "123")
        assert seen == [{"field": "email", "value": "a@b.io"}, {"field": "phone", "value": "123"}]

    def test_type_into_unknown_field(self, contacts_form: ContactsForm) -> None:
        with pytest.raises(LookupError):
            type_into(contacts_form, "address", "x")


class TestSubmit:
    def test_submit_emits_form_submit(self, contacts_form: ContactsForm, broker: EventBroker) -> None:
        rec = record(broker, Events.CONTACTS_SUBMIT)
        contacts_form.render({"valid": True})
        contacts_form.submit_button.dispatch("click")  # type: ignore[union-attr]
        assert rec.names == [Events.CONTACTS_SUBMIT]

    def test_disabled_submit_is_ignored(self, order_form: OrderForm, broker: EventBroker) -> None:
        rec = record(broker, Events.ORDER_SUBMIT)
        order_form.render({"valid": False})
        assert order_form.submit_button.disabled  # type: ignore[union-attr]
        order_form.submit()
        assert rec.names == []


class TestValidityAndErrors:
    def test_errors_joined(self, contacts_form: ContactsForm) -> None:
        contacts_form.render({"errors": ["email required", "", "phone required"]})
        assert contacts_form.container.ensure(".form__errors").text == "email required; phone required"

    def test_errors_string(self, contacts_form: ContactsForm) -> None:
        contacts_form.render({"errors": "broken"})
        assert contacts_form.container.ensure(".form__errors").text == "broken"

    def test_controlled_inputs(self, contacts_form: ContactsForm) -> None:
        contacts_form.render({"email": "a@b.io", "phone": "+7"})
        assert contacts_form.input("email").value == "a@b.io"  # type: ignore[union-attr]
        assert contacts_form.input("phone").value == "+7"  # type: ignore[union-attr]


class TestOrderForm:
    def test_payment_buttons_trigger_change(self, order_form: OrderForm, broker: EventBroker) -> None:
        rec = record(broker, Events.PAYMENT_CHANGE)
        order_form.payment_button("cash").dispatch("click")  # type: ignore[union-attr]
        (payload,) = rec.payloads(Events.PAYMENT_CHANGE)
        assert payload["payment"] == "cash"

    def test_payment_highlight(self, order_form: OrderForm) -> None:
        order_form.render({"payment": "card"})
        order_form.render({"payment": "cash"})
        assert order_form.payment_button("cash").has_class(ACTIVE_PAYMENT_CLASS)  # type: ignore[union-attr]
        assert not order_form.payment_button("card").has_class(ACTIVE_PAYMENT_CLASS)  # type: ignore[union-attr]

    def test_address_rendered_into_input(self, order_form: OrderForm) -> None:
        order_form.render({"address": "Main St 1"})
        assert order_form.input("address").value == "Main St 1"  # type: ignore[union-attr]

    def test_unknown_payment_button(self, order_form: OrderForm) -> None:
        assert order_form.payment_button("crypto") is None
