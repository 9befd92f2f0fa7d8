"""Tests for DomainState — basket, totals, order draft and validation."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

import pytest

from shopfront.domain.events import Events
from shopfront.domain.models import OrderDraft, Product
from shopfront.domain.types import PaymentMethod
from shopfront.domain.validation import EMAIL_INVALID
from shopfront.events.broker import EventBroker
from shopfront.infrastructure.storage import MemorySlot
from shopfront.services.state import DomainState, UnknownProductError
from tests.conftest import record


def _product(product_id: str, price: int | None) -> Product:
    return Product(id=product_id, title=product_id.upper(), price=price)


class _FailingSlot(MemorySlot):
    def write(self, ids: Sequence[str]) -> None:
        raise OSError("disk full")


class TestCatalog:
    def test_set_catalog_emits_products(self, state: DomainState, broker: EventBroker, products: list[Product]) -> None:
        rec = record(broker, Events.CATALOG_CHANGED)
        state.set_catalog(products)
        assert rec.payloads(Events.CATALOG_CHANGED) == [products]
        assert state.catalog == products

    def test_minimal_catalog_entries_priced(self, state: DomainState) -> None:
        state.set_catalog([Product.model_validate({"id": "p1", "price": 100})])
        state.toggle_basket_item("p1", True)
        assert state.order.total == 100

    def test_set_catalog_recomputes_total(self, state: DomainState) -> None:
        state.toggle_basket_item("p1", True)
        assert state.order.total == 0
        state.set_catalog([_product("p1", 100)])
        assert state.order.total == 100

    def test_get_product(self, state: DomainState, products: list[Product]) -> None:
        state.set_catalog(products)
        assert state.get_product("p2") == products[1]
        assert state.get_product("missing") is None

    def test_preview(self, state: DomainState, broker: EventBroker, products: list[Product]) -> None:
        rec = record(broker, Events.PREVIEW_CHANGED)
        state.set_preview(products[0])
        assert state.preview == "p1"
        assert rec.payloads(Events.PREVIEW_CHANGED) == [products[0]]
        state.clear_preview()
        assert state.preview is None


class TestBasket:
    def test_add_then_remove_total(self, state: DomainState) -> None:
        state.set_catalog([_product("p1", 100)])
        state.toggle_basket_item("p1", True)
        assert state.get_total() == 100
        state.toggle_basket_item("p1", False)
        assert state.get_total() == 0

    def test_add_is_idempotent(self, state: DomainState) -> None:
        state.set_catalog([_product("p1", 100)])
        state.toggle_basket_item("p1", True)
        state.toggle_basket_item("p1", True)
        assert state.items == ["p1"]
        assert state.order.total == 100

    def test_remove_absent_is_noop(self, state: DomainState) -> None:
        state.toggle_basket_item("p1", False)
        assert state.items == []

    def test_insertion_order_kept(self, state: DomainState) -> None:
        for product_id in ("p3", "p1", "p2"):
            state.toggle_basket_item(product_id, True)
        assert state.items == ["p3", "p1", "p2"]

    def test_random_toggles_keep_invariants(self, state: DomainState) -> None:
        catalog = [_product(f"p{i}", i * 10) for i in range(6)]
        state.set_catalog(catalog)
        rng = random.Random(1234)
        for _ in range(200):
            state.toggle_basket_item(f"p{rng.randrange(6)}", rng.random() < 0.6)
            items = state.items
            assert len(items) == len(set(items))
            assert state.order.total == sum(int(i[1:]) * 10 for i in items)

    def test_toggle_emits_basket_changed_without_payload(self, state: DomainState, broker: EventBroker) -> None:
        rec = record(broker, Events.BASKET_CHANGED)
        state.toggle_basket_item("p1", True)
        assert rec.payloads(Events.BASKET_CHANGED) == [None]

    def test_items_is_a_copy(self, state: DomainState) -> None:
        state.toggle_basket_item("p1", True)
        state.items.append("p9")
        assert state.items == ["p1"]

    def test_snapshot_mirrors_items(self, state: DomainState, slot: MemorySlot) -> None:
        state.toggle_basket_item("p1", True)
        state.toggle_basket_item("p2", True)
        state.toggle_basket_item("p1", False)
        assert slot.read() == ["p2"]

    def test_clear_basket_resets_draft(self, state: DomainState, slot: MemorySlot, products: list[Product]) -> None:
        state.set_catalog(products)
        state.toggle_basket_item("p1", True)
        state.set_payment_method("cash")
        state.set_order_field("address", "Main St 1")
        state.set_order_field("email", "a@b.io")
        state.set_order_field("phone", "123")
        state.clear_basket()
        assert state.items == []
        assert state.order.total == 0
        assert state.order.payment is PaymentMethod.CARD
        assert (state.order.address, state.order.email, state.order.phone) == ("", "", "")
        assert slot.read() == []

    def test_clear_basket_revalidates(self, state: DomainState, broker: EventBroker, products: list[Product]) -> None:
        state.set_catalog(products)
        state.toggle_basket_item("p1", True)
        state.set_order_field("address", "Main St 1")
        state.set_order_field("email", "a@b.io")
        state.set_order_field("phone", "123")
        assert state.form_errors == {}
        rec = record(broker, Events.VALIDATION_CHANGED)
        state.clear_basket()
        assert set(state.form_errors) == {"address", "email", "phone"}
        assert set(rec.payloads(Events.VALIDATION_CHANGED)[-1]) == {"address", "email", "phone"}

    def test_failed_snapshot_write_leaves_basket(self, broker: EventBroker, products: list[Product]) -> None:
        state = DomainState(broker, _FailingSlot())
        state.set_catalog(products)
        rec = record(broker, Events.BASKET_CHANGED)
        with pytest.raises(OSError, match="disk full"):
            state.toggle_basket_item("p1", True)
        assert state.items == []
        assert state.order.total == 0
        assert rec.names == []


class TestRestore:
    def test_restore_reads_snapshot(self, broker: EventBroker) -> None:
        state = DomainState(broker, MemorySlot(["p2", "p1", "p2"]))
        rec = record(broker, Events.BASKET_CHANGED)
        state.restore_basket()
        assert state.items == ["p2", "p1"]
        assert rec.names == [Events.BASKET_CHANGED]

    def test_restore_before_catalog_totals_zero(self, broker: EventBroker) -> None:
        state = DomainState(broker, MemorySlot(["p1"]))
        state.restore_basket()
        assert state.order.total == 0
        state.set_catalog([_product("p1", 100)])
        assert state.order.total == 100

    def test_restore_from_corrupt_slot_is_empty(self, broker: EventBroker) -> None:
        slot = MemorySlot()
        slot._raw = "{not json"
        state = DomainState(broker, slot)
        state.restore_basket()
        assert state.items == []


class TestStaleItems:
    def test_unknown_id_contributes_zero(self, state: DomainState) -> None:
        state.set_catalog([_product("p1", 100)])
        state.toggle_basket_item("p1", True)
        state.toggle_basket_item("gone", True)
        assert state.order.total == 100
        assert state.unresolved_items() == ["gone"]

    def test_total_recompute_does_not_log(self, state: DomainState, caplog: pytest.LogCaptureFixture) -> None:
        state.set_catalog([_product("p1", 100)])
        state.toggle_basket_item("gone", True)
        with caplog.at_level(logging.WARNING, logger="shopfront.services.state"):
            state.toggle_basket_item("p1", True)
            state.toggle_basket_item("p1", False)
            state.set_catalog([_product("p1", 100)])
        assert caplog.records == []

    def test_strict_total_raises(self, state: DomainState) -> None:
        state.set_catalog([_product("p1", 100)])
        state.toggle_basket_item("gone", True)
        with pytest.raises(UnknownProductError) as exc_info:
            state.get_total(strict=True)
        assert exc_info.value.product_id == "gone"

    def test_unresolved_and_prune(self, state: DomainState, slot: MemorySlot) -> None:
        state.set_catalog([_product("p1", 100)])
        state.toggle_basket_item("gone", True)
        state.toggle_basket_item("p1", True)
        assert state.unresolved_items() == ["gone"]
        assert state.prune_basket() == ["gone"]
        assert state.items == ["p1"]
        assert slot.read() == ["p1"]


class TestOrderDraft:
    def test_set_payment_method(self, state: DomainState, broker: EventBroker) -> None:
        rec = record(broker, Events.ORDER_CHANGED)
        state.set_payment_method("cash")
        assert state.order.payment is PaymentMethod.CASH
        assert rec.names == [Events.ORDER_CHANGED]

    def test_invalid_payment_method(self, state: DomainState) -> None:
        with pytest.raises(ValueError, match="Allowed: card, cash"):
            state.set_payment_method("crypto")
        assert state.order.payment is PaymentMethod.CARD

    def test_payment_via_set_order_field(self, state: DomainState) -> None:
        state.set_order_field("payment", "cash")
        assert state.order.payment is PaymentMethod.CASH

    def test_unknown_field_rejected(self, state: DomainState) -> None:
        with pytest.raises(ValueError, match="Unknown order field"):
            state.set_order_field("total", "5")

    def test_field_change_validates(self, state: DomainState, broker: EventBroker) -> None:
        rec = record(broker, Events.VALIDATION_CHANGED, Events.ORDER_READY)
        state.set_order_field("address", "Main St 1")
        assert rec.names == [Events.VALIDATION_CHANGED]
        assert set(rec.payloads(Events.VALIDATION_CHANGED)[0]) == {"email", "phone"}

    def test_order_ready_when_last_field_becomes_valid(self, state: DomainState, broker: EventBroker) -> None:
        state.set_order_field("address", "Main St 1")
        state.set_order_field("phone", "+123")
        rec = record(broker, Events.VALIDATION_CHANGED, Events.ORDER_READY)
        state.set_order_field("email", "x@y.com")
        assert rec.names == [Events.VALIDATION_CHANGED, Events.ORDER_READY]
        assert rec.payloads(Events.VALIDATION_CHANGED) == [{}]
        assert rec.payloads(Events.ORDER_READY) == [state.order]

    def test_validate_empty_draft(self, state: DomainState) -> None:
        assert state.validate() is False
        assert set(state.form_errors) == {"address", "email", "phone"}

    def test_validate_reports_format_not_required(self, state: DomainState) -> None:
        state.order = OrderDraft(address="A", email="bad", phone="+123")
        assert state.validate() is False
        assert state.form_errors == {"email": EMAIL_INVALID}

    def test_validate_complete_draft(self, state: DomainState) -> None:
        state.order = OrderDraft(address="A", email="a@b.co", phone="+123")
        assert state.validate() is True
        assert state.form_errors == {}

    def test_build_order_request(self, state: DomainState, products: list[Product]) -> None:
        state.set_catalog(products)
        state.toggle_basket_item("p1", True)
        state.toggle_basket_item("p2", True)
        state.set_order_field("address", "Main St 1")
        request = state.build_order_request()
        assert request.items == ["p1", "p2"]
        assert request.total == 3250
        assert request.address == "Main St 1"
        assert request.payment is PaymentMethod.CARD


class TestNoSubscribers:
    def test_unrelated_emit_leaves_state_alone(self, state: DomainState, broker: EventBroker) -> None:
        state.toggle_basket_item("p1", True)
        broker.emit("nobody-listens", {"x": 1})
        assert state.items == ["p1"]
