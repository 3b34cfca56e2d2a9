"""Tests for configuration management."""

import json

import pytest
from pydantic import ValidationError

from taskflow_cli.config import (
    ENDPOINT_ENV_VAR,
    Config,
    ConfigManager,
    FanOutPolicy,
    get_config_manager,
)


def test_default_config():
    """Test default configuration."""
    config = Config()
    assert config.api.endpoint == "http://localhost:8080/api"
    assert config.api.timeout == 30
    assert config.aggregation.fanout_policy is FanOutPolicy.ALL_OR_NOTHING
    assert config.aggregation.recent_projects == 5
    assert config.output.format == "table"


def test_config_manager_uses_platform_dirs(tmp_path):
    manager = ConfigManager(profile="work")
    assert manager.config_file == tmp_path / "config" / "work.json"
    assert manager.session_dir == tmp_path / "data" / "work"
    assert manager.session_dir.is_dir()


def test_config_save_load(tmp_path):
    """Test saving and loading configuration."""
    manager = ConfigManager()
    manager.set("api.endpoint", "https://taskflow.example.com/api")

    data = json.loads(manager.config_file.read_text(encoding="utf-8"))
    assert data["api"]["endpoint"] == "https://taskflow.example.com/api"
    assert ConfigManager().config.api.endpoint == "https://taskflow.example.com/api"


def test_corrupted_config_falls_back_to_defaults():
    manager = ConfigManager()
    manager.config_file.write_text("{not json", encoding="utf-8")
    assert manager.load_config() == Config()


def test_environment_overrides_endpoint(monkeypatch):
    monkeypatch.setenv(ENDPOINT_ENV_VAR, "http://staging:8080/api")
    assert ConfigManager().config.api.endpoint == "http://staging:8080/api"


def test_get_nested_value():
    manager = ConfigManager()
    assert manager.get("aggregation.recent_projects") == 5
    assert manager.get("aggregation.missing") is None
    assert manager.get("api.timeout.deeper") is None


def test_set_unknown_key_raises():
    manager = ConfigManager()
    with pytest.raises(KeyError):
        manager.set("api.retries", 3)
    with pytest.raises(KeyError):
        manager.set("nothing.here", 1)


def test_set_invalid_value_raises():
    with pytest.raises(ValidationError):
        ConfigManager().set("aggregation.recent_projects", -1)


def test_output_format_is_restricted():
    manager = ConfigManager()
    manager.set("output.format", "yaml")
    assert manager.config.output.format == "yaml"
    with pytest.raises(ValidationError):
        manager.set("output.format", "xml")


def test_reset_key_and_all():
    manager = ConfigManager()
    manager.set("aggregation.fanout_policy", "best_effort")
    manager.set("api.timeout", 5)

    manager.reset("aggregation.fanout_policy")
    assert manager.config.aggregation.fanout_policy is FanOutPolicy.ALL_OR_NOTHING
    assert manager.config.api.timeout == 5

    manager.reset()
    assert manager.config == Config()


def test_reset_unknown_key_raises():
    with pytest.raises(KeyError):
        ConfigManager().reset("api.nope")


def test_get_config_manager_is_per_profile():
    default = get_config_manager()
    assert get_config_manager() is default
    assert get_config_manager("work").profile == "work"
