"""Configuration utilities for the tourneyphotos CLI.

This module provides shared configuration functions used across CLI commands.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any


def get_config_dir() -> Path:
    """Get the configuration directory for tourneyphotos.

    Returns:
        Path to ~/.tourneyphotos.
    """
    return Path.home() / ".tourneyphotos"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, Any]:
    """Load configuration from config file."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text()))
    return {}


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2))


def get_photo_dir() -> Path:
    """Get the local photo directory.

    Returns:
        Path to the photo directory (configured or default ~/.tourneyphotos/photos).
    """
    config = load_config()
    if config.get("photo_dir"):
        return Path(config["photo_dir"]).expanduser().resolve()
    return get_config_dir() / "photos"


def mask_key(key: str | None) -> str:
    """Show only the start of an API key."""
    if not key:
        return "missing"
    return f"{key[:8]}..."


def setup_logging(verbose: bool = False) -> None:
    """Configure the tourneyphotos logger to write to stderr.

    Args:
        verbose: Log debug messages instead of warnings and errors only.
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    root_logger = logging.getLogger("tourneyphotos")
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Replace handlers so repeated invocations don't duplicate output
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(stderr_handler)
