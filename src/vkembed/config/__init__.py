"""Configuration for vkembed."""

from vkembed.config.loader import (
    ConfigSource,
    ServiceConfig,
    clear_config_cache,
    get_config,
)

__all__ = [
    "ConfigSource",
    "ServiceConfig",
    "clear_config_cache",
    "get_config",
]
