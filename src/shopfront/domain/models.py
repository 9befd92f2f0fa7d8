"""Pydantic models for catalog products and orders.

Products are frozen: created from a catalog fetch and never mutated.
The order draft is the one mutable aggregate and is owned by DomainState.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from shopfront.domain.types import CATEGORY_ALIASES, DEFAULT_PAYMENT, Category, PaymentMethod

PRICELESS = 0


class Product(BaseModel):
    """A catalog entry."""

    model_config = {"frozen": True}

    id: str
    title: str = ""
    description: str = ""
    image: str = ""
    category: Category = Category.OTHER
    price: int = Field(default=PRICELESS, ge=0)

    @field_validator("category", mode="before")
    @classmethod
    def _accept_api_labels(cls, value: Any) -> Any:
        if isinstance(value, str) and value in CATEGORY_ALIASES:
            return CATEGORY_ALIASES[value]
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_missing_price(cls, value: Any) -> Any:
        return PRICELESS if value is None else value

    @property
    def is_priceless(self) -> bool:
        """Priceless items are shown but cannot be added to the basket."""
        return self.price == PRICELESS


class OrderDraft(BaseModel):
    """The in-progress order: payment, contact fields, and selected items.

    ``items`` keeps insertion order and never holds duplicates.
    ``total`` is derived by DomainState; never assign it from outside.
    """

    model_config = {"validate_assignment": True}

    payment: PaymentMethod = DEFAULT_PAYMENT
    address: str = ""
    email: str = ""
    phone: str = ""
    items: list[str] = Field(default_factory=list)
    total: int = 0


class OrderRequest(BaseModel):
    """Wire payload for ``POST /order``."""

    model_config = {"frozen": True}

    payment: PaymentMethod
    address: str
    email: str
    phone: str
    total: int
    items: list[str]


class OrderReceipt(BaseModel):
    """Response of a successful order submission."""

    model_config = {"frozen": True, "populate_by_name": True}

    order_id: str = Field(alias="id")
    total: int


class CatalogPage(BaseModel):
    """Response envelope of ``GET /product/``."""

    total: int = 0
    items: list[dict[str, Any]] = Field(default_factory=list)
