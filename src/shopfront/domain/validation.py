"""Order draft validation rules.

Every rule runs independently: all applicable errors are reported at once.
Validation errors are data, never exceptions.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shopfront.domain.models import OrderDraft

ValidationErrors = dict[str, str]

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"\+?[0-9]+")

ADDRESS_REQUIRED = "address required"
EMAIL_REQUIRED = "email required"
EMAIL_INVALID = "invalid email format"
PHONE_REQUIRED = "phone required"
PHONE_INVALID = "phone must contain only digits (optional leading +)"

# Fields each checkout step is responsible for.
ORDER_STEP_FIELDS = ("payment", "address")
CONTACTS_STEP_FIELDS = ("email", "phone")


def validate_order(draft: OrderDraft) -> ValidationErrors:
    """Return field -> message for every failing rule of *draft*."""
    errors: ValidationErrors = {}

    if not draft.address:
        errors["address"] = ADDRESS_REQUIRED

    if not draft.email:
        errors["email"] = EMAIL_REQUIRED
    elif EMAIL_RE.fullmatch(draft.email) is None:
        errors["email"] = EMAIL_INVALID

    if not draft.phone:
        errors["phone"] = PHONE_REQUIRED
    elif PHONE_RE.fullmatch(draft.phone) is None:
        errors["phone"] = PHONE_INVALID

    return errors


def errors_for(errors: ValidationErrors, fields: tuple[str, ...]) -> list[str]:
    """Messages of *errors* restricted to *fields*, in field order."""
    return [errors[name] for name in fields if name in errors]
