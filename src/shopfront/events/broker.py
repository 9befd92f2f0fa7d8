"""Synchronous publish/subscribe broker with exact and pattern subscriptions.

Dispatch order for ``emit(name, payload)``:

1. handlers subscribed to the exact *name*, in registration order;
2. handlers subscribed under a pattern that matches *name*, in
   registration order;
3. catch-all handlers, which receive a :class:`BrokerEvent`.

Emission is re-entrant and depth-first: a handler may emit, and the nested
emission runs to completion before the outer one continues. Nothing is
queued or deferred.

INVARIANT: emitting a name nobody listens to is a silent no-op.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]
CatchAllHandler = Callable[["BrokerEvent"], None]

DEFAULT_MAX_DEPTH = 32


class EmissionDepthError(RuntimeError):
    """Nested emissions exceeded the broker's depth guard (likely a cycle)."""

    def __init__(self, name: str, depth: int) -> None:
        super().__init__(f"Emission of '{name}' exceeded max depth {depth}")
        self.name = name
        self.depth = depth


@dataclass(frozen=True)
class BrokerEvent:
    """What a catch-all handler receives."""

    name: str
    payload: Any = None


@dataclass(frozen=True)
class ExactSubscription:
    name: str
    handler: Handler

    def matches(self, name: str) -> bool:
        return self.name == name


@dataclass(frozen=True)
class PatternSubscription:
    pattern: re.Pattern[str]
    handler: Handler

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None


Subscription = ExactSubscription | PatternSubscription


class EventBroker:
    """Routes named events to interested handlers.

    Parameters:
        max_depth: Nesting limit for re-entrant emission. Exceeding it raises
            :class:`EmissionDepthError` instead of recursing forever.
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be >= 1.")
        self._max_depth = max_depth
        self._subscriptions: list[Subscription] = []
        self._catch_all: list[CatchAllHandler] = []
        self._depth = 0

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, name_or_pattern: str | re.Pattern[str], handler: Handler) -> None:
        """Register *handler* for an exact event name or a compiled pattern.

        The same handler may be registered more than once; it is then
        invoked once per registration.
        """
        if isinstance(name_or_pattern, re.Pattern):
            self._subscriptions.append(PatternSubscription(name_or_pattern, handler))
            return
        if not isinstance(name_or_pattern, str) or not name_or_pattern.strip():
            raise ValueError("event name must be a non-empty string or a compiled pattern.")
        self._subscriptions.append(ExactSubscription(name_or_pattern, handler))

    def subscribe_all(self, handler: CatchAllHandler) -> None:
        """Register *handler* for every emitted event (diagnostics)."""
        self._catch_all.append(handler)

    def unsubscribe(
        self,
        name_or_pattern: str | re.Pattern[str],
        handler: Handler | None = None,
    ) -> None:
        """Remove subscriptions.

        For an exact name, removes every registration of *handler* under that
        name (all handlers of the name when *handler* is None). For a pattern,
        removes every handler registered under that same pattern object.
        """
        if isinstance(name_or_pattern, re.Pattern):
            self._subscriptions = [
                sub
                for sub in self._subscriptions
                if not (isinstance(sub, PatternSubscription) and sub.pattern is name_or_pattern)
            ]
            return
        self._subscriptions = [
            sub
            for sub in self._subscriptions
            if not (
                isinstance(sub, ExactSubscription)
                and sub.name == name_or_pattern
                and (handler is None or sub.handler == handler)
            )
        ]

    def unsubscribe_all(self, handler: CatchAllHandler) -> None:
        """Remove every registration of a catch-all *handler*."""
        self._catch_all = [h for h in self._catch_all if h != handler]

    def clear(self) -> None:
        """Drop every subscription, catch-alls included."""
        self._subscriptions = []
        self._catch_all = []

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emit(self, name: str, payload: Any = None) -> None:
        """Synchronously dispatch *name* with *payload*.

        Handler exceptions propagate to the caller.
        """
        if self._depth >= self._max_depth:
            raise EmissionDepthError(name, self._max_depth)

        # Handlers added or removed during dispatch take effect on the next emit.
        subscriptions = list(self._subscriptions)
        catch_all = list(self._catch_all)
        logger.debug("emit %s (depth=%d)", name, self._depth)

        self._depth += 1
        try:
            # Logs written by handlers carry the event being dispatched.
            with structlog.contextvars.bound_contextvars(broker_event=str(name), broker_depth=self._depth):
                for sub in subscriptions:
                    if isinstance(sub, ExactSubscription) and sub.matches(name):
                        sub.handler(payload)
                for sub in subscriptions:
                    if isinstance(sub, PatternSubscription) and sub.matches(name):
                        sub.handler(payload)
                if catch_all:
                    event = BrokerEvent(name=name, payload=payload)
                    for handler in catch_all:
                        handler(event)
        finally:
            self._depth -= 1

    def trigger(
        self,
        name: str,
        context: Mapping[str, Any] | None = None,
    ) -> Callable[..., None]:
        """Return a callback that emits *name* when invoked.

        The callback accepts an optional argument; *context* is merged over
        it. A non-mapping argument (e.g. a view event) is carried under the
        ``event`` key.
        """

        def _fire(arg: Any = None) -> None:
            if arg is None:
                base: dict[str, Any] = {}
            elif isinstance(arg, Mapping):
                base = dict(arg)
            else:
                base = {"event": arg}
            self.emit(name, {**base, **(context or {})})

        return _fire

    @property
    def depth(self) -> int:
        """Current emission nesting depth (0 when idle)."""
        return self._depth
