"""Configuration management for kidcal using YAML files."""

from pathlib import Path
from typing import Any

import structlog
import yaml

from kidcal.models import ValidationError

logger = structlog.get_logger()

CONFIG_DIR_NAME = ".kidcal"

STORE_TYPES = ("json", "sqlite")

DEFAULTS: dict[str, Any] = {
    "store": "json",
    "store.path": None,
    "autosave.delay_ms": 300,
}


def validate(key: str, value: str) -> Any:
    """Check a value typed on the command line and convert it for storage.

    Raises:
        ValidationError: If the key is unknown or the value does not fit it
    """
    value = value.strip()
    if key == "store":
        if value.lower() not in STORE_TYPES:
            raise ValidationError(f"store must be one of: {', '.join(STORE_TYPES)}")
        return value.lower()
    if key == "store.path":
        if not value:
            raise ValidationError("store.path must not be empty")
        return value
    if key == "autosave.delay_ms":
        try:
            delay = int(value)
        except ValueError:
            raise ValidationError(f"autosave.delay_ms must be whole milliseconds, got {value!r}") from None
        if delay < 0:
            raise ValidationError("autosave.delay_ms must not be negative")
        return delay
    raise ValidationError(f"Unknown config key: {key}. Known keys: {', '.join(DEFAULTS)}")


class Config:
    """Configuration manager using YAML file storage.

    Local config lives in .kidcal/config.yaml in the current directory and
    global config in ~/.kidcal/config.yaml. Reads check local config first,
    then global config, then the built-in defaults.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            use_global: If True, use global config only. If False, use local config with global fallback.
            config_dir: Custom directory to store config file (overrides use_global)
        """
        if config_dir is not None:
            self.config_dir = Path(config_dir)
            self.is_global = use_global
        elif use_global:
            self.config_dir = Path.home() / CONFIG_DIR_NAME
            self.is_global = True
        else:
            self.config_dir = Path.cwd() / CONFIG_DIR_NAME
            self.is_global = False

        self.config_file = self.config_dir / "config.yaml"
        self._config: dict[str, Any] = self._load(self.config_file)

        self._global_config: dict[str, Any] = {}
        if not self.is_global:
            global_config_file = Path.home() / CONFIG_DIR_NAME / "config.yaml"
            if global_config_file != self.config_file and global_config_file.exists():
                try:
                    self._global_config = self._load(global_config_file)
                except ValueError as e:
                    logger.warning("Failed to load global config", error=str(e))

        logger.debug("Config initialized", config_file=str(self.config_file), is_global=self.is_global)

    @staticmethod
    def _load(config_file: Path) -> dict[str, Any]:
        if not config_file.exists():
            logger.debug("Config file does not exist, initializing empty config", config_file=str(config_file))
            return {}

        try:
            with open(config_file, "r") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", error=str(e))
            raise ValueError(f"Failed to load config from {config_file}: {e}") from e

        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")
        logger.debug("Config loaded successfully", keys=list(config.keys()))
        return config

    def _save(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
            logger.debug("Config saved successfully")
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to save config", error=str(e))
            raise ValueError(f"Failed to save config to {self.config_file}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value.

        Args:
            key: Configuration key
            default: Returned when the key is set nowhere and has no built-in default

        Returns:
            Configuration value or default
        """
        if key in self._config:
            logger.debug("Getting config value from local", key=key)
            return self._config[key]

        if not self.is_global and key in self._global_config:
            logger.debug("Getting config value from global", key=key)
            return self._global_config[key]

        value = DEFAULTS.get(key)
        return default if value is None else value

    def set(self, key: str, value: str) -> None:
        """Validate and store a value in this config file.

        Raises:
            ValidationError: If the key is unknown or the value does not fit it
        """
        self._config[key] = validate(key, value)
        logger.debug("Setting config value", key=key)
        self._save()

    def unset(self, key: str) -> None:
        logger.debug("Unsetting config value", key=key)
        if key in self._config:
            del self._config[key]
            self._save()

    def source(self, key: str) -> str | None:
        """Where the effective value of a key comes from: local, global, default or None."""
        if key in self._config:
            return "global" if self.is_global else "local"
        if not self.is_global and key in self._global_config:
            return "global"
        if DEFAULTS.get(key) is not None:
            return "default"
        return None

    def list(self) -> dict[str, Any]:
        """List all explicitly set configuration settings.

        For local config, merges global config with local config (local takes precedence).
        """
        if self.is_global:
            return self._config.copy()
        merged = self._global_config.copy()
        merged.update(self._config)
        return merged

    def autosave_delay(self) -> float:
        """Debounce delay for autosave, in seconds."""
        value = self.get("autosave.delay_ms")
        try:
            return max(0, int(value)) / 1000
        except (TypeError, ValueError):
            logger.warning("Invalid autosave.delay_ms, using default", value=value)
            return DEFAULTS["autosave.delay_ms"] / 1000

    def store_path(self) -> Path:
        """Data file location, relative paths resolved against the working directory."""
        path = self.get("store.path")
        if path:
            return Path(path)
        suffix = "db" if self.get("store") == "sqlite" else "json"
        return Path.cwd() / CONFIG_DIR_NAME / f"data.{suffix}"


def get_config(use_global: bool = False) -> Config:
    """Get a configuration instance.

    Args:
        use_global: If True, return global config. If False, return local config with global fallback.
    """
    return Config(use_global=use_global)
