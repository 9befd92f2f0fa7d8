"""DomainState — the single mutable application-state aggregate.

Holds the catalog, the order draft (basket items included), validation
errors, and the preview selection. Every mutation goes through this class
and it alone emits domain-change events.

INVARIANT: ``order.total`` equals the summed catalog price of
``order.items`` after every mutation of the items or the catalog.
INVARIANT: the snapshot slot mirrors ``order.items`` after every toggle. The
slot is written first, so a failed write leaves the basket unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from shopfront.domain.events import Events
from shopfront.domain.models import OrderDraft, OrderRequest, Product
from shopfront.domain.types import DEFAULT_PAYMENT, PaymentMethod
from shopfront.domain.validation import ValidationErrors, validate_order

if TYPE_CHECKING:
    from shopfront.events.broker import EventBroker
    from shopfront.infrastructure.storage import SnapshotSlot

logger = logging.getLogger(__name__)

ORDER_FIELDS = ("address", "email", "phone")


class UnknownProductError(LookupError):
    """A basket id has no matching catalog entry."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"No catalog entry for product '{product_id}'")
        self.product_id = product_id


class DomainState:
    """Source of truth for catalog, basket, order draft, validation and preview.

    Parameters:
        broker: Broker that receives every domain-change event.
        slot: Durable slot the basket id sequence is mirrored into.
    """

    def __init__(self, broker: EventBroker, slot: SnapshotSlot) -> None:
        self._broker = broker
        self._slot = slot
        self.catalog: list[Product] = []
        self.preview: str | None = None
        self.order = OrderDraft()
        self.form_errors: ValidationErrors = {}

    def _emit(self, name: str, payload: Any = None) -> None:
        self._broker.emit(name, payload)

    # ------------------------------------------------------------------
    # Catalog and preview
    # ------------------------------------------------------------------

    def set_catalog(self, products: Iterable[Product]) -> None:
        """Replace the catalog. Basket membership is left as is."""
        self.catalog = list(products)
        self.order.total = self.get_total()
        self._emit(Events.CATALOG_CHANGED, self.catalog)

    def get_product(self, product_id: str) -> Product | None:
        for product in self.catalog:
            if product.id == product_id:
                return product
        return None

    def set_preview(self, product: Product) -> None:
        self.preview = product.id
        self._emit(Events.PREVIEW_CHANGED, product)

    def clear_preview(self) -> None:
        self.preview = None

    # ------------------------------------------------------------------
    # Basket
    # ------------------------------------------------------------------

    @property
    def items(self) -> list[str]:
        """Basket product ids in insertion order (a copy)."""
        return list(self.order.items)

    def in_basket(self, product_id: str) -> bool:
        return product_id in self.order.items

    def toggle_basket_item(self, product_id: str, included: bool) -> None:
        """Add (*included*) or remove a product id. Idempotent both ways."""
        items = list(self.order.items)
        if included:
            if product_id not in items:
                items.append(product_id)
        else:
            items = [i for i in items if i != product_id]

        self._slot.write(items)
        self.order.items = items
        self.order.total = self.get_total()
        self._emit(Events.BASKET_CHANGED)

    def restore_basket(self) -> None:
        """Load the persisted basket. Called once at startup."""
        restored: list[str] = []
        for product_id in self._slot.read():
            if product_id not in restored:
                restored.append(product_id)
        self.order.items = restored
        self.order.total = self.get_total()
        logger.debug("Restored %d basket item(s)", len(restored))
        self._emit(Events.BASKET_CHANGED)

    def prune_basket(self) -> list[str]:
        """Drop basket ids that are not in the catalog; returns the dropped ids."""
        stale = self.unresolved_items()
        for product_id in stale:
            self.toggle_basket_item(product_id, False)
        if stale:
            logger.info("Pruned %d stale basket item(s): %s", len(stale), ", ".join(stale))
        return stale

    def clear_basket(self) -> None:
        """Empty the basket and reset the draft, then re-validate it."""
        for product_id in list(self.order.items):
            self.toggle_basket_item(product_id, False)
        self.order.payment = DEFAULT_PAYMENT
        self.order.address = ""
        self.order.email = ""
        self.order.phone = ""
        self.order.total = self.get_total()
        self.validate()

    def unresolved_items(self) -> list[str]:
        """Basket ids with no catalog entry."""
        known = {p.id for p in self.catalog}
        return [i for i in self.order.items if i not in known]

    def get_total(self, *, strict: bool = False) -> int:
        """Summed price of the basket.

        Ids missing from the catalog contribute 0 (see :meth:`unresolved_items`);
        with *strict* they raise :class:`UnknownProductError` instead.
        """
        prices = {p.id: p.price for p in self.catalog}
        total = 0
        for product_id in self.order.items:
            price = prices.get(product_id)
            if price is None:
                if strict:
                    raise UnknownProductError(product_id)
                continue
            total += price
        return total

    # ------------------------------------------------------------------
    # Order draft
    # ------------------------------------------------------------------

    def set_payment_method(self, value: str) -> None:
        try:
            self.order.payment = PaymentMethod(value)
        except ValueError:
            allowed = ", ".join(m.value for m in PaymentMethod)
            raise ValueError(f"Invalid payment method '{value}'. Allowed: {allowed}") from None
        self._emit(Events.ORDER_CHANGED)

    def set_order_field(self, field: str, value: str) -> None:
        """Set a draft field and re-validate; emits ``order-ready`` when valid."""
        if field == "payment":
            self.set_payment_method(value)
            return
        if field not in ORDER_FIELDS:
            raise ValueError(f"Unknown order field '{field}'. Allowed: {', '.join(ORDER_FIELDS)}")
        setattr(self.order, field, value)
        if self.validate():
            self._emit(Events.ORDER_READY, self.order)

    def validate(self) -> bool:
        """Recompute validation errors, announce them, and report validity."""
        self.form_errors = validate_order(self.order)
        self._emit(Events.VALIDATION_CHANGED, dict(self.form_errors))
        return not self.form_errors

    def build_order_request(self) -> OrderRequest:
        """Snapshot of the draft in wire form."""
        return OrderRequest(
            payment=self.order.payment,
            address=self.order.address,
            email=self.order.email,
            phone=self.order.phone,
            total=self.order.total,
            items=list(self.order.items),
        )
