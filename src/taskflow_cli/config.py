"""Configuration management for TaskFlow CLI."""

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, Field

ENDPOINT_ENV_VAR = "TASKFLOW_API_URL"


class FanOutPolicy(str, Enum):
    """How per-project task fetches are joined when one of them fails."""

    ALL_OR_NOTHING = "all_or_nothing"
    BEST_EFFORT = "best_effort"


class APIConfig(BaseModel):
    """API configuration."""

    endpoint: str = Field(default="http://localhost:8080/api")
    timeout: int = Field(default=30)


class AggregationConfig(BaseModel):
    """Dashboard aggregation configuration."""

    fanout_policy: FanOutPolicy = Field(default=FanOutPolicy.ALL_OR_NOTHING)
    recent_projects: int = Field(default=5, ge=0)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["table", "json", "yaml"] = Field(default="table")
    color: bool = Field(default=True)


class Config(BaseModel):
    """Main configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


class ConfigManager:
    """Manages TaskFlow CLI configuration."""

    def __init__(self, profile: str = "default"):
        self.profile = profile
        self.config_dir = Path(user_config_dir("taskflow-cli"))
        self.data_dir = Path(user_data_dir("taskflow-cli"))
        self.config_file = self.config_dir / f"{profile}.json"
        self.session_dir = self.data_dir / profile

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.session_dir.mkdir(parents=True, exist_ok=True)

        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file, applying environment overrides."""
        config = Config()
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                config = Config(**data)
            except (OSError, ValueError):
                # If config is corrupted, fall back to defaults
                config = Config()

        endpoint = os.environ.get(ENDPOINT_ENV_VAR)
        if endpoint:
            config.api.endpoint = endpoint
        return config

    def save_config(self, config: Optional[Config] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self.config

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(mode="json"), f, indent=2)

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        return self.get_from_config(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: If *key* does not name an existing setting.
            pydantic.ValidationError: If *value* has the wrong type.
        """
        keys = key.split(".")
        config_dict = self.config.model_dump(mode="json")

        # Navigate to the nested dictionary
        current = config_dict
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                raise KeyError(key)
            current = current[k]
        if keys[-1] not in current:
            raise KeyError(key)

        current[keys[-1]] = value

        # Reload config from the modified dictionary
        self._config = Config(**config_dict)
        self.save_config()

    def reset(self, key: Optional[str] = None) -> None:
        """Reset configuration to defaults."""
        if key is None:
            self._config = Config()
            self.save_config()
            return

        default_value = self.get_from_config(Config(), key)
        if default_value is None:
            raise KeyError(key)
        if isinstance(default_value, Enum):
            default_value = default_value.value
        self.set(key, default_value)

    @staticmethod
    def get_from_config(config: Config, key: str) -> Any:
        """Get value from a config object using dot notation."""
        keys = key.split(".")
        value: Any = config
        for k in keys:
            if isinstance(value, BaseModel):
                value = getattr(value, k, None)
            else:
                return None
        return value


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(profile: str = "default") -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None or _config_manager.profile != profile:
        _config_manager = ConfigManager(profile)
    return _config_manager
