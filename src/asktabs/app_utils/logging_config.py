"""Logging setup shared by the API server and the CLI."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(default: str = "INFO") -> int:
    """Level from ``LOG_LEVEL``, else ``default``. Unknown names mean INFO."""
    name = (os.getenv("LOG_LEVEL") or default).upper()
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(default_level: Optional[str] = None) -> int:
    """Send log records to stdout and set the ``asktabs`` logger level.

    The server logs at INFO; one-shot CLI commands pass ``"WARNING"`` so
    their output stays readable. ``LOG_LEVEL`` overrides both.

    Returns:
        The level that was applied.
    """
    level = resolve_log_level(default_level or "INFO")
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("asktabs").setLevel(level)
    return level
