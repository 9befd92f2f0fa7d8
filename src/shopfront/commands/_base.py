"""Click base classes with ``--examples`` support.

Commands declare their usage examples as a plain block of shell lines.
``--examples`` prints them (normalised to a two-space indent) and exits, and
``--help`` only carries a one-line hint, so help output stays short.
"""

from __future__ import annotations

import inspect
import textwrap
from typing import Any

import click

EXAMPLES_HINT = "Run with --examples to see usage examples."


def _examples_option(text: str) -> click.Option:
    def _show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(text)
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show,
        help="Show usage examples and exit.",
    )


class _ExamplesMixin:
    """Shared wiring for commands and groups that carry examples."""

    params: list[click.Parameter]
    epilog: str | None

    def _attach_examples(self, examples: str | None) -> None:
        self.examples = textwrap.indent(inspect.cleandoc(examples), "  ") if examples else None
        if self.examples:
            self.params.append(_examples_option(self.examples))
            self.epilog = self.epilog or EXAMPLES_HINT


class ShopCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class ShopGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`ShopCommand`."""

    command_class = ShopCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)
