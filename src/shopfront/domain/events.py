"""Broker event names — the stable wire protocol between views and state.

Domain-change events are emitted only by DomainState; the rest are
emitted by components on user interaction.
"""

from __future__ import annotations

import re
from enum import StrEnum


class Events(StrEnum):
    """Fixed event names."""

    # --- emitted by DomainState ---
    CATALOG_CHANGED = "catalog-changed"
    PREVIEW_CHANGED = "preview-changed"
    BASKET_CHANGED = "basket-changed"
    ORDER_CHANGED = "order-changed"
    ORDER_READY = "order-ready"
    VALIDATION_CHANGED = "validation-changed"

    # --- emitted by components ---
    CARD_SELECT = "card:select"
    BASKET_OPEN = "basket:open"
    ORDER_OPEN = "order:open"
    CONTACTS_OPEN = "contacts:open"
    PAYMENT_CHANGE = "payment:change"
    ORDER_SUBMIT = "order:submit"
    CONTACTS_SUBMIT = "contacts:submit"
    MODAL_OPEN = "modal:open"
    MODAL_CLOSE = "modal:close"


ORDER_FORM = "order"
CONTACTS_FORM = "contacts"

# Matches ``order.<field>:change`` and ``contacts.<field>:change``.
FIELD_CHANGE_PATTERN = re.compile(r"^(order|contacts)\..+:change$")


def field_change(form: str, field: str) -> str:
    """Event name for a tracked input change, e.g. ``order.address:change``."""
    return f"{form}.{field}:change"


def form_submit(form: str) -> str:
    """Event name for a form submission, e.g. ``contacts:submit``."""
    return f"{form}:submit"
