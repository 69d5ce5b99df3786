"""Configuration service implementation."""

import os
import yaml
import logging
from dataclasses import fields
from pathlib import Path
from typing import Dict, Any, Optional

from core.exceptions import ConfigurationError
from core.interfaces.config_interface import IConfigService
from core.models.config import DEFAULT_WSUS_PORT, RunConfig, UpdateServerConfig

DEFAULT_CONFIG_PATH = "config/default.yml"


class ConfigService(IConfigService):
    """Builds the RunConfig from YAML, environment variables and overrides."""

    env_mappings = {
        "OFFLINE_PATCH_SERVER": "server.host",
        "OFFLINE_PATCH_PORT": "server.port",
        "OFFLINE_PATCH_CONTENT_ROOT": "content_root",
        "OFFLINE_PATCH_TARGET_GROUP": "target_group",
        "OFFLINE_PATCH_LOG_FILE": "log_file",
        "OFFLINE_PATCH_DISM_PATH": "dism_path",
    }

    def __init__(self, config_file_path: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self._config_file_path = config_file_path
        self._raw_config: Dict[str, Any] = {}

        if config_file_path:
            self.load_file(config_file_path)

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Centralized error handling and logging."""
        self.logger.error(f"Error {operation}: {str(error)}")
        raise ConfigurationError(f"Error {operation}: {str(error)}") from error

    def load_file(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load settings from a YAML file.

        Without an explicit path the default file is used if it exists.
        """
        if config_path is None:
            if not Path(DEFAULT_CONFIG_PATH).exists():
                self._raw_config = {}
                return self._raw_config
            config_path = DEFAULT_CONFIG_PATH

        try:
            path = Path(config_path)

            if not path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")

            with open(path, "r", encoding="utf-8") as file:
                raw_config = yaml.safe_load(file) or {}

            if not isinstance(raw_config, dict):
                raise ValueError("Configuration file must contain a mapping")

            self._raw_config = raw_config
            self._config_file_path = config_path
            self.logger.debug(f"Loaded configuration from {config_path}")
            return self._raw_config

        except (OSError, ValueError, yaml.YAMLError) as e:
            self._handle_error("loading configuration", e)

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a raw setting by key path (e.g., 'server.port')."""
        value: Any = self._raw_config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def build_run_config(
        self, overrides: Optional[Dict[str, Any]] = None
    ) -> RunConfig:
        """Merge file settings, environment and overrides into a RunConfig."""
        merged = _deep_copy(self._raw_config)
        self._apply_environment_overrides(merged)

        for key, value in (overrides or {}).items():
            if value is not None:
                self._set_nested_value(merged, key, value)

        try:
            config = self._parse_run_config(merged)
        except (TypeError, ValueError) as e:
            self._handle_error("parsing configuration", e)

        errors = config.validate()
        if errors:
            for error in errors:
                self.logger.error(error)
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}", errors
            )
        return config

    def _parse_run_config(self, raw: Dict[str, Any]) -> RunConfig:
        """Parse raw configuration into a RunConfig object."""
        server_data = raw.get("server") or {}
        if not isinstance(server_data, dict):
            raise ValueError("'server' must be a mapping")

        server = UpdateServerConfig(
            host=str(server_data.get("host") or ""),
            port=int(server_data.get("port") or DEFAULT_WSUS_PORT),
            use_ssl=_as_bool(server_data.get("use_ssl", False)),
        )

        known = {f.name for f in fields(RunConfig)} - {"server"}
        unknown = set(raw) - known - {"server"}
        for key in sorted(unknown):
            self.logger.warning(f"Ignoring unknown configuration key: {key}")

        values = {k: v for k, v in raw.items() if k in known}
        for flag in ("confirm", "discard", "verbose", "debug"):
            if flag in values:
                values[flag] = _as_bool(values[flag])
        if "image_index" in values:
            values["image_index"] = int(values["image_index"])
        if "mount_grace_seconds" in values:
            values["mount_grace_seconds"] = float(values["mount_grace_seconds"])

        return RunConfig(server=server, **values)

    def _apply_environment_overrides(self, config: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration."""
        for env_var, config_key in self.env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                if config_key == "server.port" and env_value.isdigit():
                    env_value = int(env_value)
                self._set_nested_value(config, config_key, env_value)

    def _set_nested_value(
        self, config: Dict[str, Any], key_path: str, value: Any
    ) -> None:
        """Set a nested value in configuration dictionary."""
        keys = key_path.split(".")
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ["true", "yes", "1", "on"]
    return bool(value)


def _deep_copy(config: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _deep_copy(v) if isinstance(v, dict) else v for k, v in config.items()}
