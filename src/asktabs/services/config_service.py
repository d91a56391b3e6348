"""Configuration service - YAML-backed load and save."""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from asktabs.app_utils.config_schema import AskTabsConfig
from asktabs.app_utils.paths import get_config_file

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for managing AskTabs configuration."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """Initialize config service.

        Args:
            config_file: Path to config file. Defaults to ~/.asktabs/config.yaml
        """
        self.config_file = Path(config_file) if config_file else get_config_file()
        self.config_dir = self.config_file.parent

    def load(self) -> AskTabsConfig:
        """Load configuration from YAML file.

        Creates default config if file doesn't exist.
        """
        if not self.config_file.exists():
            config = AskTabsConfig.create_default()
            try:
                self.save(config)
            except OSError as e:
                logger.warning(f"Could not write default config: {e}")
            return config

        try:
            with open(self.config_file, "r") as f:
                data = yaml.safe_load(f) or {}
            return AskTabsConfig.from_dict(data)
        except (yaml.YAMLError, IOError, TypeError, ValueError) as e:
            logger.warning(f"Invalid config at {self.config_file}, using defaults: {e}")
            return AskTabsConfig.create_default()

    def save(self, config: AskTabsConfig) -> None:
        """Save configuration to YAML file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(
                config.to_dict(), f, default_flow_style=False, sort_keys=False
            )
