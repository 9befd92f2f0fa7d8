"""Product categories and payment methods.

Closed sets shared by the catalog, the order draft, and the card views.
"""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    """Catalog product categories."""

    SOFT = "soft-skill"
    HARD = "hard-skill"
    OTHER = "other"
    ADDITIONAL = "additional"
    BUTTON = "button"

    @property
    def modifier(self) -> str:
        """CSS modifier suffix used by ``card__category_<modifier>``."""
        return _MODIFIERS[self]


_MODIFIERS: dict[Category, str] = {
    Category.SOFT: "soft",
    Category.HARD: "hard",
    Category.OTHER: "other",
    Category.ADDITIONAL: "additional",
    Category.BUTTON: "button",
}

# Labels served by the upstream catalog API.
CATEGORY_ALIASES: dict[str, Category] = {
    "софт-скил": Category.SOFT,
    "хард-скил": Category.HARD,
    "другое": Category.OTHER,
    "дополнительное": Category.ADDITIONAL,
    "кнопка": Category.BUTTON,
}


class PaymentMethod(StrEnum):
    """Payment options offered on the order form."""

    CARD = "card"
    CASH = "cash"


DEFAULT_PAYMENT = PaymentMethod.CARD
