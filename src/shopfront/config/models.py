"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, shopfront.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from shopfront.events.broker import DEFAULT_MAX_DEPTH
from shopfront.infrastructure.api import DEFAULT_TIMEOUT
from shopfront.infrastructure.storage import DEFAULT_BASKET_KEY

DEFAULT_API_URL = "https://larek-api.nomoreparties.co/api/weblarek"
DEFAULT_CDN_URL = "https://larek-api.nomoreparties.co/content/weblarek"


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    base_url: str = DEFAULT_API_URL
    cdn_url: str = DEFAULT_CDN_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    data_dir: Path = Path(".shopfront")
    basket_key: str = DEFAULT_BASKET_KEY


class BrokerConfig(BaseModel):
    """[broker] section."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)


class BasketConfig(BaseModel):
    """[basket] section."""

    model_config = {"frozen": True}

    # Drop basket ids the freshly loaded catalog no longer lists.
    prune_stale: bool = False

