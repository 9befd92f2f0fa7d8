"""End-to-end shopper journeys through the CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from shopfront.cli import cli
from tests.conftest import FakeShopServer


def _json(runner: CliRunner, *args: str) -> dict:
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)["data"]


@pytest.mark.usefixtures("_isolated_shop")
class TestShopperJourney:
    def test_browse_fill_and_pay(self, cli_runner: CliRunner, server: FakeShopServer) -> None:
        catalog = _json(cli_runner, "catalog")
        buyable = [item["id"] for item in catalog["items"] if item["price"]]
        for product_id in buyable:
            _json(cli_runner, "basket", "add", product_id)

        assert _json(cli_runner, "show", buyable[0])["button"] == "Remove from basket"
        assert _json(cli_runner, "basket", "show")["total"] == 3250

        receipt = _json(
            cli_runner,
            "checkout",
            "--address",
            "Main St 1",
            "--email",
            "a@b.io",
            "--phone",
            "123",
        )
        assert receipt["total"] == 3250
        assert server.orders[0]["items"] == buyable
        assert _json(cli_runner, "catalog")["items"][0]["in_basket"] is False

    def test_catalog_shrinks_under_basket(self, cli_runner: CliRunner, server: FakeShopServer) -> None:
        _json(cli_runner, "basket", "add", "p1")
        _json(cli_runner, "basket", "add", "p2")
        server.catalog = [item for item in server.catalog if item["id"] != "p1"]

        result = cli_runner.invoke(cli, ["basket", "show"])
        assert result.exit_code == 0
        assert "WARNING: Basket item p1 is not in the catalog" in result.output

        result = cli_runner.invoke(cli, ["checkout", "--address", "A", "--email", "a@b.io", "--phone", "1"])
        assert result.exit_code == 1
        assert "missing from the catalog" in result.output

    def test_prune_stale_setting(self, cli_runner: CliRunner, server: FakeShopServer, tmp_path: Path) -> None:
        (tmp_path / "shopfront.toml").write_text("[basket]\nprune_stale = true\n")
        _json(cli_runner, "basket", "add", "p1")
        _json(cli_runner, "basket", "add", "p2")
        server.catalog = [item for item in server.catalog if item["id"] != "p1"]

        result = cli_runner.invoke(cli, ["basket", "show"])
        assert result.exit_code == 0
        assert "WARNING: Basket item" not in result.output
        assert [row["id"] for row in _json(cli_runner, "basket", "show")["items"]] == ["p2"]
