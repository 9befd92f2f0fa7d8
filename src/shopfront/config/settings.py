"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SHOPFRONT_*`` prefix (``__`` for nested sections)
  3. TOML file    — ``shopfront.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The TOML file is found by walking up from the working directory, the way
git finds ``.git/``, unless ``--config`` or ``SHOPFRONT_CONFIG`` names one.
A named file that does not exist is a :class:`ConfigError`.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from shopfront.config.models import ApiConfig, BasketConfig, BrokerConfig, StorageConfig


class ConfigError(ValueError):
    """The TOML config file is missing or could not be parsed."""


CONFIG_FILENAME = "shopfront.toml"
CONFIG_ENV_VAR = "SHOPFRONT_CONFIG"


def _named_file(value: str, source: str) -> Path:
    path = Path(value)
    if not path.is_file():
        raise ConfigError(f"Config file from {source} not found: {path}")
    return path


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file: ``SHOPFRONT_CONFIG`` first, then walk up from *start*."""
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        return _named_file(env_path, CONFIG_ENV_VAR)
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``shopfront.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class ShopSettings(BaseSettings):
    """Unified settings for the shopfront CLI.

    Attributes:
        config_path: The TOML file in effect, or None when none was found.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SHOPFRONT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    api: ApiConfig = Field(default_factory=ApiConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    broker: BrokerConfig = Field(default_factory=BrokerConfig)
    basket: BasketConfig = Field(default_factory=BasketConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> ShopSettings:
        """Construct settings from a CLI invocation.

        Discovers ``shopfront.toml`` via walk-up from *start* (or uses the
        explicit *config_path*) and merges CLI flags as highest-priority
        overrides. ``None`` flag values are dropped so they do not mask
        env vars or TOML.
        """
        toml_path = _named_file(config_path, "--config") if config_path else find_config(start)

        overrides = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
