"""ShopService — CLI-facing operations driven through the storefront views.

Each operation performs the same interactions a shopper would (select a
card, press its button, type into the checkout forms) so the whole
broker → state → view cycle runs, then reports the outcome as a
:class:`ServiceResult`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shopfront.components.form import type_into
from shopfront.domain.events import Events
from shopfront.domain.validation import errors_for
from shopfront.infrastructure.api import ShopApiError
from shopfront.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from shopfront.domain.models import Product
    from shopfront.services.storefront import Storefront


def _product_row(product: Product, *, in_basket: bool) -> dict[str, Any]:
    return {**product.model_dump(mode="json"), "in_basket": in_basket}


class ShopService:
    """Shop operations over a started :class:`Storefront`."""

    def __init__(self, storefront: Storefront) -> None:
        self._shop = storefront

    async def _ensure_catalog(self, op: str) -> ServiceResult | None:
        """Start the storefront; a failure result when the catalog is unavailable."""
        if self._shop.state.catalog:
            return None
        if await self._shop.start():
            return None
        err = self._shop.last_error
        return failure(op, ErrorCode.API_ERROR, f"Catalog unavailable: {err.message if err else 'unknown error'}")

    def _warnings(self) -> list[str]:
        return [f"Basket item {i} is not in the catalog" for i in self._shop.state.unresolved_items()]

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def catalog(self) -> ServiceResult:
        op = "catalog"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        state = self._shop.state
        items = [_product_row(p, in_basket=state.in_basket(p.id)) for p in state.catalog]
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    async def show(self, product_id: str) -> ServiceResult:
        """Fetch one product and open it in the preview."""
        op = "show"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        try:
            product = await self._shop.api.fetch_product_by_id(product_id)
        except ShopApiError as exc:
            code = ErrorCode.NOT_FOUND if exc.status_code == 404 else ErrorCode.API_ERROR
            return failure(op, code, exc.message, id=product_id)

        self._shop.broker.emit(Events.CARD_SELECT, product)
        card = self._shop.preview_card
        data = _product_row(product, in_basket=self._shop.state.in_basket(product.id))
        data["button"] = card.button.text if card is not None and card.button is not None else ""
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Basket
    # ------------------------------------------------------------------

    def _basket_data(self) -> dict[str, Any]:
        state = self._shop.state
        rows = []
        for index, product_id in enumerate(state.items, start=1):
            product = state.get_product(product_id)
            rows.append(
                {
                    "index": index,
                    "id": product_id,
                    "title": product.title if product else "",
                    "price": product.price if product else 0,
                }
            )
        return {"items": rows, "total": state.order.total, "count": len(rows)}

    async def basket(self) -> ServiceResult:
        op = "basket"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        self._shop.broker.emit(Events.BASKET_OPEN)
        return ServiceResult(ok=True, op=op, data=self._basket_data(), warnings=self._warnings())

    async def add(self, product_id: str) -> ServiceResult:
        """Select the product card and press its add button."""
        op = "basket_add"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        product = self._shop.state.get_product(product_id)
        if product is None:
            return failure(op, ErrorCode.NOT_FOUND, f"No product with id '{product_id}'", id=product_id)
        if product.is_priceless:
            return failure(op, ErrorCode.NOT_FOR_SALE, f"'{product.title}' is not for sale", id=product_id)

        if not self._shop.state.in_basket(product_id):
            self._shop.broker.emit(Events.CARD_SELECT, product)
            card = self._shop.preview_card
            if card is not None and card.button is not None:
                card.button.dispatch("click")
        return ServiceResult(ok=True, op=op, data=self._basket_data(), warnings=self._warnings())

    async def remove(self, product_id: str) -> ServiceResult:
        """Open the basket and press the row's delete button."""
        op = "basket_remove"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        if not self._shop.state.in_basket(product_id):
            return failure(op, ErrorCode.NOT_FOUND, f"'{product_id}' is not in the basket", id=product_id)

        self._shop.broker.emit(Events.BASKET_OPEN)
        for card in self._shop.basket_cards:
            if card.id == product_id and card.button is not None:
                card.button.dispatch("click")
                break
        return ServiceResult(ok=True, op=op, data=self._basket_data(), warnings=self._warnings())

    async def clear(self) -> ServiceResult:
        op = "basket_clear"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        removed = len(self._shop.state.items)
        self._shop.state.clear_basket()
        return ServiceResult(ok=True, op=op, data={**self._basket_data(), "removed": removed})

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    async def checkout(self, *, payment: str, address: str, email: str, phone: str) -> ServiceResult:
        """Walk both checkout steps and submit the order."""
        op = "checkout"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        shop = self._shop
        state = shop.state
        if not state.items:
            return failure(op, ErrorCode.EMPTY_BASKET, "The basket is empty")
        if stale := state.unresolved_items():
            return failure(op, ErrorCode.INVALID_ORDER, "Basket holds products missing from the catalog", items=stale)

        shop.broker.emit(Events.BASKET_OPEN)
        button = shop.views.basket.checkout_button
        if button is not None:
            button.dispatch("click")

        order_form = shop.views.order
        pay_button = order_form.payment_button(payment)
        if pay_button is None:
            return failure(op, ErrorCode.INVALID_ORDER, f"Unknown payment method '{payment}'", payment=payment)
        pay_button.dispatch("click")
        type_into(order_form, "address", address)
        if order_form.submit_button is not None and order_form.submit_button.disabled:
            return self._invalid(op, ("payment", "address"))
        order_form.submit()

        contacts_form = shop.views.contacts
        type_into(contacts_form, "email", email)
        type_into(contacts_form, "phone", phone)
        if contacts_form.submit_button is not None and contacts_form.submit_button.disabled:
            return self._invalid(op, ("email", "phone"))

        items = state.items
        shop.last_receipt = None
        contacts_form.submit()
        await shop.drain()

        receipt = shop.last_receipt
        if receipt is None:
            err = shop.last_error
            return failure(op, ErrorCode.API_ERROR, err.message if err else "Order submission failed")
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": receipt.order_id, "total": receipt.total, "items": items, "payment": payment},
        )

    def _invalid(self, op: str, fields: tuple[str, ...]) -> ServiceResult:
        errors = self._shop.state.form_errors
        messages = errors_for(errors, fields)
        return failure(
            op,
            ErrorCode.INVALID_ORDER,
            "; ".join(messages) or "Order form is incomplete",
            errors={k: v for k, v in errors.items() if k in fields},
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    async def page(self) -> ServiceResult:
        """Snapshot of the rendered page (and the modal when it is open)."""
        op = "page"
        if (err := await self._ensure_catalog(op)) is not None:
            return err
        views = self._shop.views
        data: dict[str, Any] = {"view": views.page.container.to_dict()}
        if views.modal.is_open:
            data["modal"] = views.modal.container.to_dict()
        return ServiceResult(ok=True, op=op, data=data, warnings=self._warnings())
