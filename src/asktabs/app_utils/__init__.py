"""Configuration, paths, logging and file helpers."""

from .config_schema import AskTabsConfig
from .paths import get_config_file, get_state_file, get_user_data_dir

__all__ = [
    "AskTabsConfig",
    "get_config_file",
    "get_state_file",
    "get_user_data_dir",
]
