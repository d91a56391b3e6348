"""Filesystem locations for AskTabs user data."""

import os
from pathlib import Path


def get_user_data_dir() -> Path:
    """Directory holding config and state.

    Honours ``ASKTABS_HOME``; defaults to ``~/.asktabs``.
    """
    env_home = os.environ.get("ASKTABS_HOME")
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".asktabs"


def get_config_file() -> Path:
    return get_user_data_dir() / "config.yaml"


def get_state_file() -> Path:
    return get_user_data_dir() / "state.json"
