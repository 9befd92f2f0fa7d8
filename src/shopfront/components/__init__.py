"""Component layer — headless views bound to ViewNode containers.

Components may import from domain and events. They never touch
DomainState directly: they render property bags and emit broker events.
"""

from shopfront.components.base import BindableFields, Component
from shopfront.components.view import ViewEvent, ViewNode

__all__ = ["BindableFields", "Component", "ViewEvent", "ViewNode"]
