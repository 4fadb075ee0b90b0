"""Configuration providers."""

from .provider import (
    APIConfig,
    ConfigProvider,
    EnvConfigProvider,
    StoreConfig,
    TokenConfig,
)

__all__ = ["APIConfig", "ConfigProvider", "EnvConfigProvider", "StoreConfig", "TokenConfig"]
