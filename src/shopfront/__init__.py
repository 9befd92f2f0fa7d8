"""shopfront — event-driven storefront client."""

__version__ = "0.1.0"
