"""Configuration management for SimpleTasks."""

import json
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, Field, ValidationError

APP_NAME = "simpletasks"


class APIConfig(BaseModel):
    """API configuration."""

    endpoint: str = Field(default="https://testapi.doitserver.in.ua/api")
    timeout: int = Field(default=30)


class AuthConfig(BaseModel):
    """Authentication configuration."""

    service: str = Field(default="com.simpletasks")
    logout_on_unauthorized: bool = Field(default=True)


class TasksConfig(BaseModel):
    """Task form defaults."""

    default_due_hours: int = Field(default=24)


class Config(BaseModel):
    """Main configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    tasks: TasksConfig = Field(default_factory=TasksConfig)


class ConfigManager:
    """Manages SimpleTasks configuration."""

    def __init__(self, profile: str = "default"):
        self.profile = profile
        self.config_dir = Path(user_config_dir(APP_NAME))
        self.data_dir = Path(user_data_dir(APP_NAME))
        self.config_file = self.config_dir / f"{profile}.json"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r") as f:
                    data = json.load(f)
                return Config(**data)
            except (OSError, ValueError, ValidationError):
                # If config is corrupted, return default
                return Config()
        return Config()

    def save_config(self, config: Optional[Config] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self.config

        with open(self.config_file, "w") as f:
            json.dump(config.model_dump(), f, indent=2)

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        return self.get_from_config(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key."""
        if self.get(key) is None:
            raise KeyError(key)

        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        # Validate before keeping anything
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
        self.set(key, default_value)

    @staticmethod
    def get_from_config(config: Config, key: str) -> Any:
        """Get value from a config object using dot notation."""
        value: Any = config
        for k in key.split("."):
            if isinstance(value, BaseModel):
                value = getattr(value, k, None)
            else:
                return None
        if isinstance(value, BaseModel):
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
