"""Event layer — the publish/subscribe broker shared by views and state."""

from shopfront.events.broker import BrokerEvent, EmissionDepthError, EventBroker

__all__ = ["BrokerEvent", "EmissionDepthError", "EventBroker"]
