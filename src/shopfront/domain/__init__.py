"""Domain layer — types, rules, and models.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, components, commands, or config.
"""
