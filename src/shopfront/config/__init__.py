"""Configuration layer — pydantic-settings models, TOML lookup, logging."""
