"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Runs shop operations inside a fresh storefront and
centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import click

from shopfront.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from shopfront.config.settings import ShopSettings
    from shopfront.services.result import ServiceResult
    from shopfront.services.shop import ShopService

ShopOperation = Callable[["ShopService"], Awaitable["ServiceResult"]]


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Nothing touches the network or the database until :meth:`run` is
    called, so ``--help`` and ``--version`` stay side-effect free.
    """

    def __init__(self, settings: ShopSettings) -> None:
        self.settings = settings

        from shopfront.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def run(self, operation: ShopOperation) -> ServiceResult:
        """Open a storefront, run *operation* against it, and close it again."""
        return asyncio.run(self._run(operation))

    async def _run(self, operation: ShopOperation) -> ServiceResult:
        from shopfront.services.shop import ShopService
        from shopfront.services.storefront import open_storefront

        async with open_storefront(self.settings) as storefront:
            return await operation(ShopService(storefront))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
