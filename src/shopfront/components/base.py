"""Component contract shared by every interactive view.

A component is bound to exactly one container node and is a stateless
transformer from a property bag to that view: all state lives in
DomainState. Settable fields are declared through :class:`BindableFields`
(composition) rather than a per-view class hierarchy.

``render(data)`` applies every bound key of *data*, ignores unknown keys,
and leaves absent keys untouched, so partial updates are the norm.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from shopfront.components.view import ViewNode

Setter = Callable[[Any], None]


class BindableFields:
    """Ordered mapping of property-bag key → setter."""

    def __init__(self) -> None:
        self._setters: dict[str, Setter] = {}

    def bind(self, name: str, setter: Setter) -> None:
        self._setters[name] = setter

    def apply(self, name: str, value: Any) -> bool:
        """Run the setter for *name*; False when the key is not bound."""
        setter = self._setters.get(name)
        if setter is None:
            return False
        setter(value)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._setters

    def __iter__(self) -> Iterator[str]:
        return iter(self._setters)


class Component:
    """Base view component.

    Subclasses look up their sub-elements in ``__init__`` and bind one
    setter per property-bag key.
    """

    def __init__(self, container: ViewNode) -> None:
        self.container = container
        self.fields = BindableFields()

    def render(self, data: Mapping[str, Any] | None = None) -> ViewNode:
        """Apply *data* to the view and return the container."""
        for key, value in (data or {}).items():
            self.fields.apply(key, value)
        return self.container

    # ------------------------------------------------------------------
    # Helpers: each tolerates a missing node
    # ------------------------------------------------------------------

    @staticmethod
    def set_text(node: ViewNode | None, value: Any) -> None:
        if node is not None:
            node.text = "" if value is None else str(value)

    @staticmethod
    def toggle_class(node: ViewNode | None, name: str, state: bool) -> None:
        if node is None:
            return
        if state and name not in node.classes:
            node.classes.append(name)
        elif not state and name in node.classes:
            node.classes.remove(name)

    @staticmethod
    def set_image(node: ViewNode | None, src: str, alt: str | None = None) -> None:
        if node is None:
            return
        node.attrs["src"] = src
        if alt:
            node.attrs["alt"] = alt

    @staticmethod
    def set_disabled(node: ViewNode | None, state: bool) -> None:
        if node is not None:
            node.disabled = bool(state)

    @staticmethod
    def set_hidden(node: ViewNode | None, state: bool) -> None:
        if node is not None:
            node.hidden = bool(state)
