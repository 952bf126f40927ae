"""
Service configuration loader with priority resolution.

Root directory (VKEMBED_ROOT):
- Default: ~/.vkembed
- Override: VKEMBED_ROOT environment variable

Priority for every setting (highest to lowest):
1. Environment variable (VK_SERVICE_ACCESS_KEY, VKEMBED_*)
2. Project config (.vkembed/config.yaml, searched upward from cwd)
3. User config ({root_dir}/config.yaml)
4. Defaults (config/defaults.py)

YAML structure:
    vk:
      access_token: ${VK_SERVICE_ACCESS_KEY}
      api_version: "5.199"
      api_base_url: https://api.vk.com/method
      timeout: 10
    server:
      host: 0.0.0.0
      port: 8000
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from vkembed.config import defaults
from vkembed.exceptions import ConfigurationMissingError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ENV = "VK_SERVICE_ACCESS_KEY"

# Pattern for ${ENV_VAR} interpolation
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

# Setting name -> environment variable
_ENV_VARS: dict[str, str] = {
    "access_token": ACCESS_TOKEN_ENV,
    "api_base_url": "VKEMBED_API_BASE_URL",
    "api_version": "VKEMBED_API_VERSION",
    "request_timeout": "VKEMBED_TIMEOUT",
    "host": "VKEMBED_HOST",
    "port": "VKEMBED_PORT",
}

# (yaml section, yaml key) -> setting name
_YAML_KEYS: dict[tuple[str, str], str] = {
    ("vk", "access_token"): "access_token",
    ("vk", "api_base_url"): "api_base_url",
    ("vk", "api_version"): "api_version",
    ("vk", "timeout"): "request_timeout",
    ("server", "host"): "host",
    ("server", "port"): "port",
}

_CONVERTERS = {
    "request_timeout": float,
    "port": int,
}


class ConfigSource(Enum):
    """Source of the provider credential."""

    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True)
class ServiceConfig:
    """Resolved vkembed configuration.

    ``source`` records where the access token came from; DEFAULT means
    no token is configured at all.
    """

    access_token: str | None = None
    api_base_url: str = defaults.VK_API_BASE_URL
    api_version: str = defaults.VK_API_VERSION
    request_timeout: float = defaults.REQUEST_TIMEOUT
    host: str = defaults.DEFAULT_HOST
    port: int = defaults.DEFAULT_PORT
    source: ConfigSource = ConfigSource.DEFAULT

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token)

    def require_access_token(self) -> str:
        """Return the provider credential.

        Raises:
            ConfigurationMissingError: If no credential is configured.
        """
        if not self.access_token:
            logger.error("%s not configured", ACCESS_TOKEN_ENV)
            raise ConfigurationMissingError(setting=ACCESS_TOKEN_ENV)
        return self.access_token

    def __repr__(self) -> str:
        token = "***" if self.access_token else None
        return (
            f"ServiceConfig(access_token={token!r}, api_base_url={self.api_base_url!r}, "
            f"api_version={self.api_version!r}, request_timeout={self.request_timeout!r}, "
            f"host={self.host!r}, port={self.port!r}, source={self.source.value!r})"
        )


def _interpolate_env_vars(value: Any) -> Any:
    """Replace ${ENV_VAR} patterns with environment variable values.

    Recursively processes strings, dicts, and lists. Missing env vars
    produce a warning and are replaced with empty string.
    """
    if isinstance(value, str):

        def _replace_match(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                logger.warning(
                    "Environment variable %s not set (referenced in config)", var_name
                )
                return ""
            return env_value

        return ENV_VAR_PATTERN.sub(_replace_match, value)
    if isinstance(value, dict):
        return {k: _interpolate_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env_vars(item) for item in value]
    return value


def _load_yaml_config(config_path: Path) -> dict[str, Any] | None:
    """Load configuration from a YAML file.

    Returns:
        Parsed config dict, or None if file doesn't exist or fails to parse.
    """
    if not config_path.exists():
        return None

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        return None

    if config is None:
        return {}
    if not isinstance(config, dict):
        logger.warning(f"Config file {config_path} is not a valid YAML dict")
        return None
    return _interpolate_env_vars(config)


def _settings_from_yaml(config: dict[str, Any] | None) -> dict[str, Any]:
    """Flatten the known sections of a parsed YAML config into settings."""
    if not config:
        return {}

    settings: dict[str, Any] = {}
    for (section, key), name in _YAML_KEYS.items():
        block = config.get(section)
        if not isinstance(block, dict):
            continue
        value = block.get(key)
        if value is None or value == "":
            continue
        settings[name] = value
    return settings


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw setting to its typed value, or None if invalid."""
    converter = _CONVERTERS.get(name, str)
    try:
        return converter(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid value for {name}: {value!r}")
        return None


def _find_project_config() -> Path | None:
    """Find project-level config by walking up from cwd.

    Returns:
        Path to .vkembed/config.yaml if found, None otherwise.
    """
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        config_path = parent / ".vkembed" / "config.yaml"
        if config_path.exists():
            return config_path
    return None


def _get_root_dir() -> Path:
    """Get the vkembed root directory (VKEMBED_ROOT or ~/.vkembed)."""
    env_root = os.environ.get("VKEMBED_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path.home() / ".vkembed"


def _get_user_config_path() -> Path:
    """Get the user-level config path ({root_dir}/config.yaml)."""
    return _get_root_dir() / "config.yaml"


def _resolve_config() -> ServiceConfig:
    """Resolve configuration from all sources in priority order.

    Layers are applied lowest priority first, so later layers win.

    Returns:
        Resolved ServiceConfig.
    """
    layers: list[tuple[ConfigSource, dict[str, Any]]] = []

    user_config_path = _get_user_config_path()
    user_settings = _settings_from_yaml(_load_yaml_config(user_config_path))
    if user_settings:
        logger.debug(f"Loaded user config from {user_config_path}")
        layers.append((ConfigSource.USER, user_settings))

    project_config_path = _find_project_config()
    if project_config_path:
        project_settings = _settings_from_yaml(_load_yaml_config(project_config_path))
        if project_settings:
            logger.debug(f"Loaded project config from {project_config_path}")
            layers.append((ConfigSource.PROJECT, project_settings))

    env_settings = {
        name: os.environ[var] for name, var in _ENV_VARS.items() if os.environ.get(var)
    }
    layers.append((ConfigSource.ENV, env_settings))

    resolved: dict[str, Any] = {}
    source = ConfigSource.DEFAULT
    for layer_source, settings in layers:
        for name, raw in settings.items():
            value = _coerce(name, raw)
            if value is None:
                continue
            resolved[name] = value
            if name == "access_token":
                source = layer_source

    config = ServiceConfig(source=source, **resolved)
    if config.is_configured:
        logger.info(f"Using VK access token from {source.value} config")
    else:
        logger.warning(f"{ACCESS_TOKEN_ENV} not configured; lookups will fail")
    return config


@lru_cache(maxsize=1)
def get_config() -> ServiceConfig:
    """Get resolved vkembed configuration.

    Results are cached - configuration is resolved once per process.
    To force re-resolution (e.g., after env change), use clear_config_cache().
    """
    return _resolve_config()


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    get_config.cache_clear()
