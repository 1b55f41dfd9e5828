"""Command-line interface for ftpdeck.

This module provides the main CLI entry point and assembles all commands.

Commands:
- configure: Save the transfer engine's URL and token
- upload: Upload files/directories to a host
- download: Download files/directories from a host
- history: Show transfer history
- clear-history: Delete all transfer history
- cancel: Cancel an active transfer
- retry: Retry a recorded transfer
- watch: Follow transfer events
"""

from __future__ import annotations

import asyncio
import logging

import click

from ftpdeck.client.api import EngineClient
from ftpdeck.client.cli.config import (
    get_config_dir,
    get_config_file,
    get_engine_config,
    load_config,
    save_config,
)
from ftpdeck.client.cli.history import cancel, clear_history, history, retry, watch
from ftpdeck.client.cli.transfer import download, upload

__all__ = [
    "cli",
    "get_config_dir",
    "get_config_file",
    "get_engine_config",
    "load_config",
    "save_config",
]


def configure_logging(verbose: bool) -> None:
    """Route ftpdeck log records to stderr.

    Only warnings and errors are shown unless verbose is set.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    ftpdeck_logger = logging.getLogger("ftpdeck")
    for existing in ftpdeck_logger.handlers[:]:
        ftpdeck_logger.removeHandler(existing)
    ftpdeck_logger.addHandler(handler)
    ftpdeck_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    ftpdeck_logger.propagate = False


@click.group()
@click.version_option(package_name="ftpdeck")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """ftpdeck - dual-pane FTP/SFTP transfer client."""
    configure_logging(verbose)


@cli.command()
@click.option("--engine-url", required=True, help="Engine URL (e.g., http://127.0.0.1:7420).")
@click.option("--token", required=True, help="Engine access token.")
@click.option("--download-dir", default=None, help="Default local download directory.")
@click.option("--no-verify-ssl", is_flag=True, help="Skip TLS certificate checks.")
def configure(
    engine_url: str,
    token: str,
    download_dir: str | None,
    no_verify_ssl: bool,
) -> None:
    """Save the transfer engine connection settings."""
    config = load_config()
    config["engine_url"] = engine_url.rstrip("/")
    config["token"] = token
    config["verify_ssl"] = not no_verify_ssl
    if download_dir:
        config["download_dir"] = download_dir
    save_config(config)
    click.echo(f"Saved configuration to {get_config_file()}")

    async def _check() -> bool:
        async with EngineClient(get_engine_config()) as engine:
            return await engine.health_check()

    if asyncio.run(_check()):
        click.echo("Engine is reachable.")
    else:
        click.secho(f"Warning: no engine answered at {config['engine_url']}", fg="yellow")


# Transfer commands
cli.add_command(upload)
cli.add_command(download)

# History commands
cli.add_command(history)
cli.add_command(clear_history)
cli.add_command(cancel)
cli.add_command(retry)
cli.add_command(watch)
