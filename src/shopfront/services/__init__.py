"""Service layer — application state, orchestration, and CLI-facing operations.

Services may import from domain, events, components, and infrastructure.
They must never import from commands or output.
"""
