"""HTTP client for the remote catalog/order API.

Endpoints:

- ``GET  /product/``      → ``{"total": n, "items": [product, ...]}``
- ``GET  /product/<id>``  → ``product``
- ``POST /order``         → ``{"id": "...", "total": n}``

Image paths are resolved against the asset (CDN) base, and a null price
is coerced to the priceless sentinel by :class:`Product` itself.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError

from shopfront.domain.models import CatalogPage, OrderReceipt, OrderRequest, Product

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ShopApiError(Exception):
    """A catalog or order request failed (transport, HTTP status, or payload)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ShopApi:
    """Async catalog/order client over :class:`httpx.AsyncClient`.

    Parameters:
        base_url: API root, e.g. ``https://larek-api.nomoreparties.co/api/weblarek``.
        cdn_url: Asset base that relative image paths are resolved against.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str,
        cdn_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cdn_url = cdn_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> ShopApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_catalog(self) -> list[Product]:
        """Fetch every catalog product."""
        data = await self._request("GET", "/product/")
        try:
            page = CatalogPage.model_validate(data)
            return [self._to_product(item) for item in page.items]
        except ValidationError as exc:
            raise ShopApiError(f"Malformed catalog payload: {exc}") from exc

    async def fetch_product_by_id(self, product_id: str) -> Product:
        """Fetch a single product."""
        data = await self._request("GET", f"/product/{product_id}")
        try:
            return self._to_product(data)
        except ValidationError as exc:
            raise ShopApiError(f"Malformed product payload: {exc}") from exc

    async def submit_order(self, request: OrderRequest) -> OrderReceipt:
        """Submit an order; returns the server-assigned id and total."""
        data = await self._request("POST", "/order", json=request.model_dump(mode="json"))
        try:
            return OrderReceipt.model_validate(data)
        except ValidationError as exc:
            raise ShopApiError(f"Malformed order receipt: {exc}") from exc

    def resolve_image(self, path: str) -> str:
        """Absolute URL for *path*; absolute URLs pass through unchanged."""
        if not path or urlsplit(path).scheme:
            return path
        return f"{self.cdn_url.rstrip('/')}/{path.lstrip('/')}"

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _to_product(self, raw: Any) -> Product:
        if not isinstance(raw, dict):
            raise ShopApiError("Product payload must be an object")
        return Product.model_validate({**raw, "image": self.resolve_image(raw.get("image") or "")})

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise ShopApiError(f"{method} {path} failed: {exc}") from exc
        logger.debug("%s %s -> %d", method, path, response.status_code)
        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        """Return the decoded body, or raise with the server's error message."""
        try:
            data = response.json()
        except ValueError:
            data = None
        if response.is_success:
            if data is None:
                raise ShopApiError("Response body is not JSON", status_code=response.status_code)
            return data
        message = response.reason_phrase or f"HTTP {response.status_code}"
        if isinstance(data, dict) and data.get("error"):
            message = str(data["error"])
        raise ShopApiError(message, status_code=response.status_code)
