"""Infrastructure layer — HTTP catalog/order client and durable storage.

May import from domain. Must never import from services, components,
commands, or output.
"""
