"""Tests for the service config loader."""

from pathlib import Path

import pytest

from vkembed.config.loader import (
    ConfigSource,
    ServiceConfig,
    _find_project_config,
    _get_user_config_path,
    _interpolate_env_vars,
    _load_yaml_config,
    _resolve_config,
    _settings_from_yaml,
    clear_config_cache,
    get_config,
)
from vkembed.exceptions import ConfigurationMissingError

_ENV_VARS = [
    "VK_SERVICE_ACCESS_KEY",
    "VKEMBED_API_BASE_URL",
    "VKEMBED_API_VERSION",
    "VKEMBED_TIMEOUT",
    "VKEMBED_HOST",
    "VKEMBED_PORT",
]


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Empty environment, empty root dir, cwd without project config."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    root = tmp_path / "root"
    root.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("VKEMBED_ROOT", str(root))
    monkeypatch.chdir(work)
    return root, work


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestServiceConfig:
    def test_defaults(self):
        config = ServiceConfig()
        assert config.access_token is None
        assert config.api_base_url == "https://api.vk.com/method"
        assert config.api_version == "5.199"
        assert config.request_timeout == 10.0
        assert config.port == 8000
        assert config.source == ConfigSource.DEFAULT
        assert not config.is_configured

    def test_require_access_token(self):
        assert ServiceConfig(access_token="abc").require_access_token() == "abc"
        with pytest.raises(ConfigurationMissingError):
            ServiceConfig().require_access_token()

    def test_repr_hides_token(self):
        assert "secret" not in repr(ServiceConfig(access_token="secret"))

    def test_is_frozen(self):
        config = ServiceConfig()
        with pytest.raises(AttributeError):
            config.port = 1  # type: ignore


class TestYamlHelpers:
    def test_load_missing_file(self, tmp_path):
        assert _load_yaml_config(tmp_path / "nope.yaml") is None

    def test_load_empty_file(self, tmp_path):
        assert _load_yaml_config(_write(tmp_path / "c.yaml", "")) == {}

    def test_load_non_dict(self, tmp_path):
        assert _load_yaml_config(_write(tmp_path / "c.yaml", "- a\n- b\n")) is None

    def test_load_malformed(self, tmp_path):
        assert _load_yaml_config(_write(tmp_path / "c.yaml", "vk: [unclosed")) is None

    def test_interpolation(self, monkeypatch):
        monkeypatch.setenv("MY_KEY", "s3cret")
        assert _interpolate_env_vars({"a": ["${MY_KEY}"], "b": 1}) == {"a": ["s3cret"], "b": 1}

    def test_interpolation_missing_var(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        assert _interpolate_env_vars("${NOT_SET_ANYWHERE}") == ""

    def test_settings_from_yaml(self):
        settings = _settings_from_yaml({
            "vk": {"access_token": "t", "timeout": 5, "api_version": ""},
            "server": {"port": 9000},
            "unrelated": {"x": 1},
        })
        assert settings == {"access_token": "t", "request_timeout": 5, "port": 9000}


class TestResolveConfig:
    def test_nothing_configured(self, isolated):
        config = _resolve_config()
        assert not config.is_configured
        assert config.source == ConfigSource.DEFAULT

    def test_env(self, isolated, monkeypatch):
        monkeypatch.setenv("VK_SERVICE_ACCESS_KEY", "env-token")
        monkeypatch.setenv("VKEMBED_TIMEOUT", "2.5")
        monkeypatch.setenv("VKEMBED_PORT", "9090")
        config = _resolve_config()
        assert config.access_token == "env-token"
        assert config.request_timeout == 2.5
        assert config.port == 9090
        assert config.source == ConfigSource.ENV

    def test_user_config(self, isolated):
        root, _ = isolated
        _write(root / "config.yaml", "vk:\n  access_token: user-token\n")
        config = _resolve_config()
        assert config.access_token == "user-token"
        assert config.source == ConfigSource.USER

    def test_project_overrides_user(self, isolated):
        root, work = isolated
        _write(root / "config.yaml", "vk:\n  access_token: user-token\n  api_version: '5.100'\n")
        _write(work / ".vkembed" / "config.yaml", "vk:\n  access_token: project-token\n")
        config = _resolve_config()
        assert config.access_token == "project-token"
        assert config.api_version == "5.100"
        assert config.source == ConfigSource.PROJECT

    def test_env_overrides_project(self, isolated, monkeypatch):
        _, work = isolated
        _write(work / ".vkembed" / "config.yaml", "vk:\n  access_token: project-token\n")
        monkeypatch.setenv("VK_SERVICE_ACCESS_KEY", "env-token")
        config = _resolve_config()
        assert config.access_token == "env-token"
        assert config.source == ConfigSource.ENV

    def test_yaml_interpolation(self, isolated, monkeypatch):
        root, _ = isolated
        monkeypatch.setenv("SOME_SECRET", "interpolated")
        _write(root / "config.yaml", "vk:\n  access_token: ${SOME_SECRET}\n")
        assert _resolve_config().access_token == "interpolated"

    def test_invalid_value_ignored(self, isolated, monkeypatch):
        monkeypatch.setenv("VKEMBED_PORT", "not-a-port")
        assert _resolve_config().port == 8000

    def test_project_config_found_from_subdir(self, isolated, monkeypatch):
        _, work = isolated
        path = _write(work / ".vkembed" / "config.yaml", "vk: {}\n")
        sub = work / "a" / "b"
        sub.mkdir(parents=True)
        monkeypatch.chdir(sub)
        assert _find_project_config() == path

    def test_user_config_path(self, isolated):
        root, _ = isolated
        assert _get_user_config_path() == root.resolve() / "config.yaml"


class TestGetConfig:
    def test_cached(self, isolated, monkeypatch):
        monkeypatch.setenv("VK_SERVICE_ACCESS_KEY", "first")
        assert get_config().access_token == "first"
        monkeypatch.setenv("VK_SERVICE_ACCESS_KEY", "second")
        assert get_config().access_token == "first"
        clear_config_cache()
        assert get_config().access_token == "second"
