"""Result types returned by every ShopService operation.

A failed operation never raises into the CLI: it comes back as
``ServiceResult(ok=False)`` carrying one of the closed :class:`ErrorCode`
values, which the ``--json`` output exposes verbatim.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Why a shop operation failed."""

    NOT_FOUND = "NOT_FOUND"
    NOT_FOR_SALE = "NOT_FOR_SALE"
    API_ERROR = "API_ERROR"
    EMPTY_BASKET = "EMPTY_BASKET"
    INVALID_ORDER = "INVALID_ORDER"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one shop operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name, also the renderer key (e.g. ``"basket_add"``).
        data: Catalog rows, basket rows, receipts or view trees on success.
        warnings: Non-fatal findings, such as basket ids the catalog no longer lists.
        error: Set exactly when ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None


def failure(op: str, code: ErrorCode | str, message: str, **detail: Any) -> ServiceResult:
    """Build an ``ok=False`` result; *detail* keys become ``error.detail``."""
    return ServiceResult(ok=False, op=op, error=ServiceError(code=ErrorCode(code), message=message, detail=detail))
