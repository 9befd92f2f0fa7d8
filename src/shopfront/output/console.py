"""Rich Console factory and theme for shopfront output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SHOP_THEME = Theme(
    {
        "shop.ok": "bold green",
        "shop.error": "bold red",
        "shop.op": "bold cyan",
        "shop.key": "dim",
        "shop.id": "bold blue",
        "shop.title": "bold",
        "shop.price": "magenta",
        "shop.priceless": "italic dim",
        "shop.category.soft-skill": "green",
        "shop.category.hard-skill": "yellow",
        "shop.category.other": "magenta",
        "shop.category.additional": "blue",
        "shop.category.button": "cyan",
        "shop.view.tag": "cyan",
        "shop.view.class": "dim",
        "shop.view.disabled": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SHOP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_category(category: str) -> str:
    """Return the Rich style name for a product category."""
    name = f"shop.category.{category}"
    return name if name in SHOP_THEME.styles else ""
