"""structlog setup for shopfront.

Records go to stderr so stdout stays clean for command output, either as
console lines or (``--log-json``) as one JSON object per line. Stdlib
``logging`` records from the broker, state and API modules pass through the
same processor chain as structlog calls.

While the broker dispatches an event it binds the event name and nesting
depth as context variables. :func:`add_emission_context` folds them into a
single ``via`` field, so a log line written from inside a handler names the
emission that caused it (``via=contacts:submit@1``).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

PACKAGE_LOGGER = "shopfront"
# Transport chatter stays at WARNING even in verbose mode.
QUIET_LOGGERS = ("httpx", "httpcore")


def add_emission_context(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    name = event_dict.pop("broker_event", None)
    depth = event_dict.pop("broker_depth", None)
    if name is not None:
        event_dict["via"] = f"{name}@{depth}" if depth else str(name)
    return event_dict


def shorten_logger_name(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """``shopfront.services.state`` renders as ``services.state``."""
    name = event_dict.get("logger")
    if isinstance(name, str) and name.startswith(PACKAGE_LOGGER + "."):
        event_dict["logger"] = name[len(PACKAGE_LOGGER) + 1 :]
    return event_dict


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route shopfront logging to stderr.

    Args:
        verbose: Show DEBUG records from shopfront, including every broker emit.
        log_json: Render JSON lines instead of console output.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_emission_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        shorten_logger_name,
        structlog.processors.TimeStamper(fmt="iso" if log_json else "%H:%M:%S"),
    ]
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
