"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from shopfront.output.console import create_console, get_output, style_for_category

if TYPE_CHECKING:
    from rich.console import Console

    from shopfront.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict) and "id" in item)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


def render_view(tree: dict[str, Any]) -> Tree:
    """Build a Rich Tree from a serialized view node (see ``ViewNode.to_dict``)."""
    root = Tree(_view_label(tree))
    _add_view_children(root, tree)
    return root


# ── Helpers ───────────────────────────────────────────────────────────


def price_text(price: Any) -> Text:
    if not price:
        return Text("Priceless", style="shop.priceless")
    return Text(f"{price} synapses", style="shop.price")


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="shop.ok")
    op = Text(f"  {result.op}", style="shop.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="shop.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="shop.id")
    elif key == "title":
        v = Text(str(value), style="shop.title")
    elif key in ("price", "total"):
        v = price_text(value) if key == "price" else Text(f"{value} synapses", style="shop.price")
    elif key == "category":
        v = Text(str(value), style=style_for_category(str(value)))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _view_label(node: dict[str, Any]) -> Text:
    label = Text(node.get("tag", "?"), style="shop.view.tag")
    classes = node.get("classes") or []
    if classes:
        label.append("." + ".".join(classes), style="shop.view.class")
    if node.get("disabled"):
        label.append(" [disabled]", style="shop.view.disabled")
    if node.get("hidden"):
        label.append(" [hidden]", style="shop.view.class")
    if node.get("text"):
        label.append(f"  {node['text']}")
    if node.get("value"):
        label.append(f"  = {node['value']!r}")
    return label


def _add_view_children(branch: Tree, node: dict[str, Any]) -> None:
    for child in node.get("children", []):
        sub = branch.add(_view_label(child))
        _add_view_children(sub, child)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="shop.error")
    op = Text(f"  {result.op}", style="shop.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_catalog(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="shop.id", no_wrap=True)
    table.add_column("Title", style="shop.title")
    table.add_column("Category")
    table.add_column("Price", justify="right")
    table.add_column("In basket", justify="center")
    if verbose:
        table.add_column("Image", style="dim")

    for item in result.data.get("items", []):
        category = str(item.get("category", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("title", "")),
            Text(category, style=style_for_category(category)),
            price_text(item.get("price")),
            "✓" if item.get("in_basket") else "",
        ]
        if verbose:
            row.append(str(item.get("image", "")))
        table.add_row(*row)
    console.print(table)


def _render_product(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    keys = ["id", "title", "category", "price", "button"]
    if verbose:
        keys += ["description", "image"]
    for key in keys:
        if key in result.data:
            _field(console, key, result.data[key])


def _render_basket(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print(Text("  Basket is empty", style="dim"))
    else:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("#", justify="right")
        table.add_column("ID", style="shop.id", no_wrap=True)
        table.add_column("Title", style="shop.title")
        table.add_column("Price", justify="right")
        for item in items:
            table.add_row(
                str(item.get("index", "")),
                str(item.get("id", "")),
                str(item.get("title", "")),
                price_text(item.get("price")),
            )
        console.print(table)
    _field(console, "total", result.data.get("total", 0))
    if "removed" in result.data:
        _field(console, "removed", result.data["removed"])


def _render_checkout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "order_id", result.data.get("id", ""))
    _field(console, "total", result.data.get("total", 0))
    if verbose:
        _field(console, "payment", result.data.get("payment", ""))
        _field(console, "items", ", ".join(result.data.get("items", [])))


def _render_page(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("view", "modal"):
        tree = result.data.get(key)
        if tree:
            console.print(render_view(tree))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "catalog": _render_catalog,
    "show": _render_product,
    "basket": _render_basket,
    "basket_add": _render_basket,
    "basket_remove": _render_basket,
    "basket_clear": _render_basket,
    "checkout": _render_checkout,
    "page": _render_page,
}
