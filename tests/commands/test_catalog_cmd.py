"""Tests for the catalog and show commands."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from shopfront.cli import cli
from tests.conftest import FakeShopServer


@pytest.mark.usefixtures("_isolated_shop")
class TestCatalogCommand:
    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "catalog"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["count"] == 3
        assert data["data"]["items"][2]["price"] == 0

    def test_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["catalog"])
        assert result.exit_code == 0
        assert "Frontend developer" in result.output
        assert "Priceless" in result.output

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "catalog"])
        assert result.exit_code == 0
        assert result.output.split() == ["p1", "p2", "p3"]

    def test_api_down(self, cli_runner: CliRunner, server: FakeShopServer) -> None:
        server.fail_catalog = True
        result = cli_runner.invoke(cli, ["catalog"])
        assert result.exit_code == 1
        assert "Catalog unavailable: catalog offline" in result.output


@pytest.mark.usefixtures("_isolated_shop")
class TestShowCommand:
    def test_show(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "show", "p2"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["title"] == "Extra hour in the day"
        assert data["data"]["button"] == "Add to basket"

    def test_not_found(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "show", "nope"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "NOT_FOUND"
