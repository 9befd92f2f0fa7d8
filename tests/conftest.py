"""Shared pytest fixtures and test helpers for shopfront tests."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from shopfront.domain.models import Product
from shopfront.events.broker import EventBroker
from shopfront.infrastructure.api import ShopApi
from shopfront.infrastructure.database.engine import init_database
from shopfront.infrastructure.storage import MemorySlot
from shopfront.services.state import DomainState
from shopfront.services.storefront import Storefront

API_URL = "https://shop.test/api"
CDN_URL = "https://cdn.test/content"

_ROUTE_RE = re.compile(r"/(product/[^/]*|order)$")

# Raw catalog entries as the upstream API serves them.
CATALOG: list[dict[str, Any]] = [
    {
        "id": "p1",
        "title": "Frontend developer",
        "description": "Ships the storefront.",
        "image": "/5_Dots.svg",
        "category": "софт-скил",
        "price": 750,
    },
    {
        "id": "p2",
        "title": "Extra hour in the day",
        "description": "Time is money.",
        "image": "/Shell.svg",
        "category": "другое",
        "price": 2500,
    },
    {
        "id": "p3",
        "title": "Mythical bug fix",
        "description": "Nobody has ever seen it.",
        "image": "/Asterisk_2.svg",
        "category": "кнопка",
        "price": None,
    },
]


class FakeShopServer:
    """In-memory stand-in for the catalog/order API, served via MockTransport."""

    def __init__(self, catalog: list[dict[str, Any]] | None = None) -> None:
        self.catalog = list(CATALOG if catalog is None else catalog)
        self.orders: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.fail_catalog = False
        self.fail_order = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        match = _ROUTE_RE.search(request.url.path)
        path = "/" + match.group(1) if match else request.url.path
        if request.method == "GET" and path == "/product/":
            if self.fail_catalog:
                return httpx.Response(500, json={"error": "catalog offline"})
            return httpx.Response(200, json={"total": len(self.catalog), "items": self.catalog})
        if request.method == "GET" and path.startswith("/product/"):
            product_id = path.removeprefix("/product/")
            for item in self.catalog:
                if item["id"] == product_id:
                    return httpx.Response(200, json=item)
            return httpx.Response(404, json={"error": "NotFound"})
        if request.method == "POST" and path == "/order":
            if self.fail_order:
                return httpx.Response(400, json={"error": "Wrong total"})
            body = json.loads(request.content)
            self.orders.append(body)
            return httpx.Response(200, json={"id": f"order-{len(self.orders)}", "total": body["total"]})
        return httpx.Response(404, json={"error": "NotFound"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def products() -> list[Product]:
    """Catalog products as parsed models (image paths left relative)."""
    return [Product.model_validate(item) for item in CATALOG]


@pytest.fixture
def broker() -> EventBroker:
    return EventBroker()


@pytest.fixture
def slot() -> MemorySlot:
    return MemorySlot()


@pytest.fixture
def state(broker: EventBroker, slot: MemorySlot) -> DomainState:
    return DomainState(broker, slot)


@pytest.fixture
def server() -> FakeShopServer:
    return FakeShopServer()


@pytest.fixture
def api(server: FakeShopServer) -> ShopApi:
    """ShopApi wired to the fake server."""
    return ShopApi(API_URL, CDN_URL, transport=server.transport)


@pytest.fixture
def storefront(broker: EventBroker, state: DomainState, api: ShopApi) -> Storefront:
    """Storefront over in-memory storage and the fake server."""
    return Storefront(broker, state, api)


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def _isolated_shop(
    tmp_path: Path,
    server: FakeShopServer,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Run CLI commands in a temp directory against the fake server.

    Use via ``@pytest.mark.usefixtures("_isolated_shop")`` on command test
    classes. The basket database lands under ``tmp_path/.shopfront``.
    """
    import shopfront.services.storefront as storefront_module

    class _MockedShopApi(ShopApi):
        def __init__(self, base_url: str, cdn_url: str, **kwargs: Any) -> None:
            kwargs["transport"] = server.transport
            super().__init__(base_url, cdn_url, **kwargs)

    for var in ("SHOPFRONT_CONFIG", "SHOPFRONT_API__BASE_URL", "SHOPFRONT_STORAGE__DATA_DIR"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(storefront_module, "ShopApi", _MockedShopApi)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class Recorder:
    """Collects broker payloads for one or more event names."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def on(self, name: str) -> Any:
        def _record(payload: Any = None) -> None:
            self.calls.append((name, payload))

        return _record

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def payloads(self, name: str) -> list[Any]:
        return [payload for n, payload in self.calls if n == name]


def record(broker: EventBroker, *names: str) -> Recorder:
    """Subscribe a Recorder to each of *names*."""
    recorder = Recorder()
    for name in names:
        broker.subscribe(name, recorder.on(name))
    return recorder


@pytest.fixture(autouse=True)
def _restore_logging() -> Any:
    """CLI invocations reconfigure the root logger; put it back afterwards."""
    import logging

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    shop_level = logging.getLogger("shopfront").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("shopfront").setLevel(shop_level)
