"""ViewNode — a minimal headless element tree that components render into.

Stands in for a rendering root: enough structure (classes, text, attrs,
children) for components to bind to sub-elements, plus listener dispatch
with bubbling so user interaction can be simulated.

Selectors supported by :meth:`ViewNode.find`: ``tag``, ``.cls``, ``#id``,
``[attr=value]`` and combinations such as ``button.card__button`` or
``input[name=email]``. Descendant combinators are not supported.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

_SELECTOR_RE = re.compile(
    r"^(?P<tag>[\w-]+)?"
    r"(?P<id>#[\w-]+)?"
    r"(?P<classes>(?:\.[\w-]+)*)"
    r"(?:\[(?P<attr>[\w-]+)=(?P<value>[^\]]+)\])?$"
)


@dataclass(frozen=True)
class ViewEvent:
    """A user interaction dispatched on a node."""

    kind: str
    target: ViewNode
    detail: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[ViewEvent], None]


@dataclass(frozen=True)
class Selector:
    tag: str | None
    node_id: str | None
    classes: tuple[str, ...]
    attr: tuple[str, str] | None

    @classmethod
    def parse(cls, selector: str) -> Selector:
        match = _SELECTOR_RE.match(selector.strip())
        if match is None or not selector.strip():
            raise ValueError(f"Unsupported selector: {selector!r}")
        classes = tuple(c for c in match.group("classes").split(".") if c)
        attr = None
        if match.group("attr"):
            attr = (match.group("attr"), match.group("value").strip("'\""))
        node_id = match.group("id")[1:] if match.group("id") else None
        return cls(match.group("tag"), node_id, classes, attr)

    def matches(self, node: ViewNode) -> bool:
        if self.tag and node.tag != self.tag:
            return False
        if self.node_id and node.attrs.get("id") != self.node_id:
            return False
        if any(c not in node.classes for c in self.classes):
            return False
        if self.attr is not None:
            name, value = self.attr
            if str(node.attrs.get(name)) != value:
                return False
        return True


class ViewNode:
    """One element of a view tree."""

    def __init__(
        self,
        tag: str,
        *children: ViewNode,
        classes: str | list[str] = "",
        text: str = "",
        **attrs: Any,
    ) -> None:
        self.tag = tag
        self.classes: list[str] = classes.split() if isinstance(classes, str) else list(classes)
        self.text = text
        self.attrs: dict[str, Any] = dict(attrs)
        self.value = ""
        self.disabled = False
        self.hidden = False
        self.dataset: dict[str, str] = {}
        self.parent: ViewNode | None = None
        self.children: list[ViewNode] = []
        self._listeners: dict[str, list[Listener]] = {}
        for child in children:
            self.append(child)

    def __repr__(self) -> str:
        cls = "." + ".".join(self.classes) if self.classes else ""
        return f"<ViewNode {self.tag}{cls}>"

    # --- tree ---

    def append(self, child: ViewNode) -> ViewNode:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def replace_children(self, children: list[ViewNode]) -> None:
        for old in self.children:
            old.parent = None
        self.children = []
        for child in children:
            self.append(child)

    def iter(self) -> Iterator[ViewNode]:
        """Depth-first pre-order walk of the subtree, self excluded."""
        for child in self.children:
            yield child
            yield from child.iter()

    def find(self, selector: str) -> ViewNode | None:
        """First descendant matching *selector*, or None."""
        sel = Selector.parse(selector)
        return next((node for node in self.iter() if sel.matches(node)), None)

    def find_all(self, selector: str) -> list[ViewNode]:
        sel = Selector.parse(selector)
        return [node for node in self.iter() if sel.matches(node)]

    def ensure(self, selector: str) -> ViewNode:
        """Like :meth:`find` but the element is required."""
        node = self.find(selector)
        if node is None:
            raise LookupError(f"Selector {selector!r} matched nothing in {self!r}")
        return node

    def clone(self) -> ViewNode:
        """Deep copy of the subtree without listeners or parent link."""
        copied = ViewNode(self.tag, classes=list(self.classes), text=self.text, **copy.deepcopy(self.attrs))
        copied.value = self.value
        copied.disabled = self.disabled
        copied.hidden = self.hidden
        copied.dataset = dict(self.dataset)
        for child in self.children:
            copied.append(child.clone())
        return copied

    # --- events ---

    def add_listener(self, kind: str, listener: Listener) -> None:
        self._listeners.setdefault(kind, []).append(listener)

    def dispatch(self, kind: str, **detail: Any) -> ViewEvent:
        """Fire *kind* on this node and bubble it up to the root."""
        event = ViewEvent(kind=kind, target=self, detail=detail)
        node: ViewNode | None = self
        while node is not None:
            for listener in list(node._listeners.get(kind, [])):
                listener(event)
            node = node.parent
        return event

    # --- convenience ---

    def has_class(self, name: str) -> bool:
        return name in self.classes

    @property
    def text_content(self) -> str:
        """Own text followed by descendant text, space-joined."""
        parts = [self.text] + [n.text for n in self.iter()]
        return " ".join(p for p in parts if p)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe snapshot of the subtree (listeners excluded)."""
        data: dict[str, Any] = {"tag": self.tag, "classes": list(self.classes)}
        if self.text:
            data["text"] = self.text
        if self.attrs:
            data["attrs"] = {k: str(v) for k, v in self.attrs.items()}
        if self.value:
            data["value"] = self.value
        if self.disabled:
            data["disabled"] = True
        if self.hidden:
            data["hidden"] = True
        if self.dataset:
            data["dataset"] = dict(self.dataset)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data
