"""Configuration service interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from core.models.config import RunConfig


class IConfigService(ABC):
    """Interface for configuration management."""

    @abstractmethod
    def load_file(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load settings from a YAML file.

        Args:
            config_path: Path to the configuration file, or None for the default

        Returns:
            Raw settings dictionary (empty if no file is used)

        Raises:
            ConfigurationError: If the file is unreadable or malformed
        """
        pass

    @abstractmethod
    def build_run_config(
        self, overrides: Optional[Dict[str, Any]] = None
    ) -> RunConfig:
        """Merge file settings, environment and overrides into a RunConfig.

        Args:
            overrides: Values that win over file and environment (e.g. CLI args)

        Returns:
            Validated RunConfig

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration setting by key.

        Args:
            key: Setting key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        pass
