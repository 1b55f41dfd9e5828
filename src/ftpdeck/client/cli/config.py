"""Configuration utilities for the ftpdeck CLI.

This module provides shared configuration functions used across CLI commands.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from ftpdeck.core.config import EngineConfig


def get_config_dir() -> Path:
    """Get the configuration directory for ftpdeck.

    Returns:
        Path to ~/.ftpdeck or equivalent.
    """
    return Path.home() / ".ftpdeck"


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


def get_engine_config() -> EngineConfig:
    """Build the engine configuration from the config file.

    Raises:
        click.ClickException: If the engine has not been configured.
    """
    config = load_config()
    if not config.get("engine_url") or not config.get("token"):
        raise click.ClickException(
            "Engine not configured. Run 'ftpdeck configure' first."
        )
    return EngineConfig(
        engine_url=config["engine_url"],
        token=config["token"],
        verify_ssl=config.get("verify_ssl", True),
        default_download_dir=config.get("download_dir", "/tmp"),
    )
