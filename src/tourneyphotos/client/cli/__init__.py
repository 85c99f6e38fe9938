"""Command-line interface for tourneyphotos.

This module provides the main CLI entry point and assembles all commands.

Commands:
- configure: Store Supabase credentials and local settings
- sync: Download missing photos and upload pending ones
- watch: Upload pending photos periodically
- add: Store a captured photo for a player
- status: Show local photos and pending uploads
- clean: Remove empty (or all) local photos
"""

from __future__ import annotations

import click

from tourneyphotos.client.cli.config import (
    get_config_dir,
    get_config_file,
    get_photo_dir,
    load_config,
    save_config,
    setup_logging,
)
from tourneyphotos.client.cli.configure import configure
from tourneyphotos.client.cli.photos import add, clean, status
from tourneyphotos.client.cli.sync import sync, watch


@click.group()
@click.version_option(package_name="tourneyphotos")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs.")
def cli(verbose: bool) -> None:
    """tourneyphotos - Tournament player photos synced with Supabase Storage."""
    setup_logging(verbose)


# Configuration
cli.add_command(configure)

# Sync commands
cli.add_command(sync)
cli.add_command(watch)

# Local photo commands
cli.add_command(add)
cli.add_command(status)
cli.add_command(clean)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    # Main entry points
    "cli",
    "main",
    # Config utilities
    "get_config_dir",
    "get_config_file",
    "get_photo_dir",
    "load_config",
    "save_config",
]
