"""Product card — one component type, one property-bag schema per view kind."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any

from shopfront.components.base import Component
from shopfront.components.view import ViewEvent, ViewNode
from shopfront.domain.types import Category

CURRENCY = "synapses"
PRICELESS_LABEL = "Priceless"
NOT_FOR_SALE = "Not for sale"
ADD_TO_BASKET = "Add to basket"
REMOVE_FROM_BASKET = "Remove from basket"


class CardKind(StrEnum):
    """Where a card is shown."""

    CATALOG = "catalog"
    PREVIEW = "preview"
    BASKET = "basket"


CARD_SCHEMAS: dict[CardKind, tuple[str, ...]] = {
    CardKind.CATALOG: ("id", "title", "image", "category", "price"),
    CardKind.PREVIEW: ("id", "title", "image", "category", "price", "description", "button"),
    CardKind.BASKET: ("id", "title", "price", "index"),
}


def format_price(value: int | None) -> str:
    """``"<n> synapses"``, or the priceless label for 0 / None."""
    if not value:
        return PRICELESS_LABEL
    return f"{value} {CURRENCY}"


class Card(Component):
    """Product card bound to a catalog, preview, or basket template.

    Parameters:
        container: Card root node.
        kind: Selects the property-bag schema; keys outside it are ignored.
        on_click: Attached to the card button when the template has one,
            otherwise to the whole card.
    """

    def __init__(
        self,
        container: ViewNode,
        kind: CardKind,
        on_click: Callable[[ViewEvent], None] | None = None,
    ) -> None:
        super().__init__(container)
        self.kind = kind
        self._title = container.ensure(".card__title")
        self._image = container.find(".card__image")
        self._description = container.find(".card__text")
        self._button = container.find(".card__button")
        self._price = container.find(".card__price")
        self._category = container.find(".card__category")
        self._index = container.find(".basket__item-index")

        setters: dict[str, Callable[[Any], None]] = {
            "id": self._set_id,
            "title": self._set_title,
            "image": self._set_image,
            "description": self._set_description,
            "category": self._set_category,
            "price": self._set_price,
            "button": self._set_button,
            "index": self._set_index,
        }
        for name in CARD_SCHEMAS[kind]:
            self.fields.bind(name, setters[name])

        if on_click is not None:
            (self._button or container).add_listener("click", on_click)

    @property
    def id(self) -> str:
        return self.container.dataset.get("id", "")

    @property
    def title(self) -> str:
        return self._title.text

    @property
    def button(self) -> ViewNode | None:
        return self._button

    def _set_id(self, value: str) -> None:
        self.container.dataset["id"] = str(value)

    def _set_title(self, value: str) -> None:
        self.set_text(self._title, value)

    def _set_image(self, value: str) -> None:
        self.set_image(self._image, value, self.title)

    def _set_description(self, value: str | list[str]) -> None:
        if isinstance(value, list):
            value = "\n".join(value)
        self.set_text(self._description, value)

    def _set_category(self, value: str) -> None:
        node = self._category
        if node is None:
            return
        self.set_text(node, value)
        node.classes = [c for c in node.classes if not c.startswith("card__category_")]
        if "card__category" not in node.classes:
            node.classes.insert(0, "card__category")
        try:
            node.classes.append(f"card__category_{Category(value).modifier}")
        except ValueError:
            pass  # unknown category: text only, no colour modifier

    def _set_price(self, value: int | None) -> None:
        self.set_text(self._price, format_price(value))

    def _set_button(self, value: str) -> None:
        self.set_text(self._button, value)
        self.set_disabled(self._button, value == NOT_FOR_SALE)

    def _set_index(self, value: int | str) -> None:
        self.set_text(self._index, value)
