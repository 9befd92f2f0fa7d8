"""Storefront — wires broker events to state mutations and view re-renders.

The orchestration layer: views emit interaction events, handlers here
mutate DomainState, and DomainState's change events are turned back into
renders. Network calls (catalog load, order submission) are coroutines;
handlers that need one schedule it on the running loop and
:meth:`Storefront.drain` waits for them.

INVARIANT: network failures are logged and leave prior state untouched.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from shopfront.components import templates
from shopfront.components.basket import Basket
from shopfront.components.card import ADD_TO_BASKET, NOT_FOR_SALE, REMOVE_FROM_BASKET, Card, CardKind
from shopfront.components.contacts import ContactsForm
from shopfront.components.modal import Modal
from shopfront.components.order import OrderForm
from shopfront.components.page import Page
from shopfront.components.success import Success
from shopfront.domain.events import FIELD_CHANGE_PATTERN, Events
from shopfront.domain.validation import (
    CONTACTS_STEP_FIELDS,
    ORDER_STEP_FIELDS,
    errors_for,
    validate_order,
)
from shopfront.events.broker import EventBroker
from shopfront.infrastructure.api import ShopApi, ShopApiError
from shopfront.infrastructure.database.engine import init_database
from shopfront.infrastructure.storage import SqliteSlot
from shopfront.services.state import DomainState

if TYPE_CHECKING:
    import httpx

    from shopfront.config.settings import ShopSettings
    from shopfront.domain.models import OrderReceipt, Product

log = structlog.get_logger(__name__)


@dataclass
class Views:
    """Every long-lived view of the storefront."""

    page: Page
    modal: Modal
    basket: Basket
    order: OrderForm
    contacts: ContactsForm
    success: Success

    @classmethod
    def build(cls, broker: EventBroker) -> Views:
        modal = Modal(templates.modal(), broker)
        return cls(
            page=Page(templates.page(), broker),
            modal=modal,
            basket=Basket(templates.basket(), broker),
            order=OrderForm(templates.order_form(), broker),
            contacts=ContactsForm(templates.contacts_form(), broker),
            success=Success(templates.success(), on_close=lambda _event: modal.close()),
        )


class Storefront:
    """Orchestrates views, state, and the catalog/order API.

    Parameters:
        broker: Shared event broker.
        state: The application state.
        api: Catalog/order client.
        views: Views to drive; built from templates when omitted.
        prune_stale: Drop basket ids missing from a freshly loaded catalog.
    """

    def __init__(
        self,
        broker: EventBroker,
        state: DomainState,
        api: ShopApi,
        views: Views | None = None,
        *,
        prune_stale: bool = False,
    ) -> None:
        self.broker = broker
        self.state = state
        self.api = api
        self.views = views or Views.build(broker)
        self.prune_stale = prune_stale
        self.catalog_cards: list[Card] = []
        self.basket_cards: list[Card] = []
        self.preview_card: Card | None = None
        self.last_receipt: OrderReceipt | None = None
        self.last_error: ShopApiError | None = None
        self._pending: set[asyncio.Task[Any]] = set()
        self._submission: asyncio.Task[Any] | None = None
        self._wire()

    def _wire(self) -> None:
        on = self.broker.subscribe
        on(Events.CATALOG_CHANGED, self._on_catalog_changed)
        on(Events.CARD_SELECT, self._on_card_select)
        on(Events.PREVIEW_CHANGED, self._on_preview_changed)
        on(Events.BASKET_OPEN, self._on_basket_open)
        on(Events.BASKET_CHANGED, self._on_basket_changed)
        on(Events.ORDER_OPEN, self._on_order_open)
        on(Events.PAYMENT_CHANGE, self._on_payment_change)
        on(Events.ORDER_CHANGED, self._on_order_changed)
        on(FIELD_CHANGE_PATTERN, self._on_field_change)
        on(Events.VALIDATION_CHANGED, self._on_validation_changed)
        on(Events.ORDER_SUBMIT, self._on_order_submit)
        on(Events.CONTACTS_OPEN, self._on_contacts_open)
        on(Events.CONTACTS_SUBMIT, self._on_contacts_submit)
        on(Events.MODAL_OPEN, self._on_modal_open)
        on(Events.MODAL_CLOSE, self._on_modal_close)

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Restore the persisted basket, then load the catalog."""
        self.state.restore_basket()
        return await self.load_catalog()

    async def load_catalog(self) -> bool:
        """Fetch the catalog and apply it in one mutation. False on failure."""
        try:
            products = await self.api.fetch_catalog()
        except ShopApiError as exc:
            self.last_error = exc
            log.error("catalog.fetch_failed", error=exc.message, status=exc.status_code)
            return False
        self.state.set_catalog(products)
        if self.prune_stale:
            self.state.prune_basket()
        elif stale := self.state.unresolved_items():
            log.warning("basket.stale_items", items=stale)
        return True

    async def submit_order(self) -> OrderReceipt | None:
        """Send the draft; on success clear the basket and show the receipt.

        An empty basket or an invalid draft is refused without a request.
        """
        if not self.state.items:
            log.error("order.rejected", reason="empty basket")
            return None
        if not self.state.validate():
            log.error("order.rejected", reason="invalid draft", errors=dict(self.state.form_errors))
            return None
        request = self.state.build_order_request()
        try:
            receipt = await self.api.submit_order(request)
        except ShopApiError as exc:
            self.last_error = exc
            log.error("order.submit_failed", error=exc.message, status=exc.status_code)
            return None
        self.last_receipt = receipt
        log.info("order.submitted", order_id=receipt.order_id, total=receipt.total)
        self.state.clear_basket()
        self.views.modal.render({"content": self.views.success.render({"total": receipt.total})})
        return receipt

    def schedule(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Run *coro* on the running loop without blocking the current handler."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise RuntimeError("Storefront network actions need a running event loop") from None
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled network action has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ------------------------------------------------------------------
    # Catalog and preview
    # ------------------------------------------------------------------

    def _on_catalog_changed(self, catalog: list[Product]) -> None:
        self.catalog_cards = [self._catalog_card(product) for product in catalog]
        self.views.page.render(
            {
                "catalog": [card.container for card in self.catalog_cards],
            }
        )
        # Totals and row titles depend on the catalog.
        self._on_basket_changed()

    def _catalog_card(self, product: Product) -> Card:
        card = Card(
            templates.card_catalog(),
            CardKind.CATALOG,
            on_click=lambda _event: self.broker.emit(Events.CARD_SELECT, product),
        )
        card.render(product.model_dump())
        return card

    def _on_card_select(self, product: Product) -> None:
        self.state.set_preview(product)

    def _on_preview_changed(self, product: Product) -> None:
        card = Card(
            templates.card_preview(),
            CardKind.PREVIEW,
            on_click=lambda _event: self._toggle_from_preview(product),
        )
        self.preview_card = card
        card.render({**product.model_dump(), "button": self._preview_label(product)})
        self.views.modal.render({"content": card.container})

    def _preview_label(self, product: Product) -> str:
        if product.is_priceless:
            return NOT_FOR_SALE
        return REMOVE_FROM_BASKET if self.state.in_basket(product.id) else ADD_TO_BASKET

    def _toggle_from_preview(self, product: Product) -> None:
        if product.is_priceless:
            return
        self.state.toggle_basket_item(product.id, not self.state.in_basket(product.id))
        if self.preview_card is not None:
            self.preview_card.render({"button": self._preview_label(product)})

    # ------------------------------------------------------------------
    # Basket
    # ------------------------------------------------------------------

    def _on_basket_open(self, _payload: Any = None) -> None:
        self.views.modal.render({"content": self.views.basket.render()})

    def _on_basket_changed(self, _payload: Any = None) -> None:
        items = self.state.items
        self.basket_cards = [
            self._basket_card(product_id, index) for index, product_id in enumerate(items, start=1)
        ]
        self.views.page.render({"counter": len(items)})
        self.views.basket.render(
            {
                "items": [card.container for card in self.basket_cards],
                "total": self.state.order.total,
                "selected": items,
            }
        )

    def _basket_card(self, product_id: str, index: int) -> Card:
        card = Card(
            templates.card_basket(),
            CardKind.BASKET,
            on_click=lambda _event: self.state.toggle_basket_item(product_id, False),
        )
        product = self.state.get_product(product_id)
        if product is None:
            card.render({"id": product_id, "title": f"{product_id} (unavailable)", "price": 0, "index": index})
        else:
            card.render({**product.model_dump(), "index": index})
        return card

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def _on_order_open(self, _payload: Any = None) -> None:
        order = self.state.order
        pending = errors_for(validate_order(order), ORDER_STEP_FIELDS)
        self.views.order.render(
            {"payment": order.payment, "address": order.address, "valid": not pending, "errors": []}
        )
        self.views.modal.render({"content": self.views.order.container})

    def _on_payment_change(self, payload: dict[str, Any]) -> None:
        self.state.set_payment_method(payload["payment"])

    def _on_order_changed(self, _payload: Any = None) -> None:
        self.views.order.render({"payment": self.state.order.payment})

    def _on_field_change(self, payload: dict[str, Any]) -> None:
        self.state.set_order_field(payload["field"], payload["value"])

    def _on_validation_changed(self, errors: dict[str, str]) -> None:
        order_errors = errors_for(errors, ORDER_STEP_FIELDS)
        contacts_errors = errors_for(errors, CONTACTS_STEP_FIELDS)
        self.views.order.render({"valid": not order_errors, "errors": order_errors})
        self.views.contacts.render({"valid": not contacts_errors, "errors": contacts_errors})

    def _on_order_submit(self, _payload: Any = None) -> None:
        self.broker.emit(Events.CONTACTS_OPEN)

    def _on_contacts_open(self, _payload: Any = None) -> None:
        order = self.state.order
        pending = errors_for(validate_order(order), CONTACTS_STEP_FIELDS)
        self.views.contacts.render(
            {"email": order.email, "phone": order.phone, "valid": not pending, "errors": []}
        )
        self.views.modal.render({"content": self.views.contacts.container})

    def _on_contacts_submit(self, _payload: Any = None) -> None:
        if self._submission is not None and not self._submission.done():
            log.debug("order.submit_ignored", reason="submission pending")
            return
        self._submission = self.schedule(self.submit_order())

    # ------------------------------------------------------------------
    # Modal
    # ------------------------------------------------------------------

    def _on_modal_open(self, _payload: Any = None) -> None:
        self.views.page.render({"locked": True})

    def _on_modal_close(self, _payload: Any = None) -> None:
        self.views.page.render({"locked": False})
        self.state.clear_preview()
        self.preview_card = None


@asynccontextmanager
async def open_storefront(
    settings: ShopSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[Storefront]:
    """Composition root: build broker, state, storage, API and views once.

    The API client and the database engine are closed on exit.
    """
    engine = init_database(settings.storage.data_dir)
    api = ShopApi(
        settings.api.base_url,
        settings.api.cdn_url,
        timeout=settings.api.timeout,
        transport=transport,
    )
    try:
        broker = EventBroker(max_depth=settings.broker.max_depth)
        state = DomainState(broker, SqliteSlot(engine, settings.storage.basket_key))
        yield Storefront(broker, state, api, prune_stale=settings.basket.prune_stale)
    finally:
        await api.aclose()
        engine.dispose()
