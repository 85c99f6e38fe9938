"""Sync commands for the tourneyphotos CLI.

Commands:
- sync: Download missing photos and upload pending ones
- watch: Upload pending photos periodically
"""

from __future__ import annotations

import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from tourneyphotos.client.api import APIError, StorageClient
from tourneyphotos.client.cli.config import get_photo_dir, load_config
from tourneyphotos.client.store import LocalPhotoStore
from tourneyphotos.client.sync import (
    DownloadSummary,
    SyncEngine,
    SyncError,
    SyncPhaseError,
    SyncResult,
    UploadSummary,
)
from tourneyphotos.core.config import ConfigError, StorageConfig

DEFAULT_WATCH_INTERVAL = 300  # seconds


@contextmanager
def open_engine() -> Iterator[tuple[SyncEngine, LocalPhotoStore]]:
    """Build a sync engine from the stored configuration.

    Exits with an error message if Supabase is not configured or a setting
    is invalid.
    """
    try:
        storage_config = StorageConfig.resolve(load_config())
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    store = LocalPhotoStore(get_photo_dir())
    client = StorageClient(storage_config)
    try:
        yield SyncEngine(client, store), store
    finally:
        client.close()
        store.close()


def read_roster(players: tuple[str, ...], players_file: Path | None) -> list[str]:
    """Collect roster names from options and an optional file (one per line)."""
    names = [p for p in players if p.strip()]
    if players_file is not None:
        for line in players_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                names.append(line)
    return names


def print_summary(result: SyncResult) -> None:
    """Print the counts and errors of a sync."""
    click.echo(f"Downloaded: {result.downloaded}")
    click.echo(f"Uploaded: {result.uploaded}")
    click.echo(f"Skipped: {result.skipped}")
    click.echo(f"Failed: {result.failed}")

    if result.errors:
        click.echo(click.style("\nErrors:", fg="red"))
        for error in result.errors:
            click.echo(f"  ✗ {error}")


@click.command()
@click.option("--player", "-p", "players", multiple=True, help="Roster player name (repeatable).")
@click.option(
    "--players-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File with one roster player name per line.",
)
@click.option("--download-only", is_flag=True, help="Only download missing photos.")
@click.option("--upload-only", is_flag=True, help="Only upload pending photos.")
@click.option("--no-progress", is_flag=True, help="Disable progress messages.")
def sync(
    players: tuple[str, ...],
    players_file: Path | None,
    download_only: bool,
    upload_only: bool,
    no_progress: bool,
) -> None:
    """Synchronize local photos with the Supabase bucket.

    Downloads photos missing locally (restricted to the roster when players
    are given), then uploads photos captured since the last sync.
    """
    if download_only and upload_only:
        click.echo("Error: --download-only and --upload-only are exclusive.", err=True)
        sys.exit(1)

    roster = read_roster(players, players_file) or None

    def progress(message: str) -> None:
        if not no_progress:
            click.echo(f"  {message}")

    with open_engine() as (engine, store):
        click.echo(f"Syncing {store.root} with bucket '{engine.bucket}'...")
        if roster:
            click.echo(f"Roster: {len(roster)} players")

        try:
            if download_only:
                download = engine.download_missing(progress, roster)
                result = SyncResult.merge(download, UploadSummary())
            elif upload_only:
                upload = engine.upload_pending(progress)
                result = SyncResult.merge(DownloadSummary(), upload)
            else:
                result = engine.run_full_sync(progress, roster)
        except SyncPhaseError as e:
            click.echo()
            print_summary(e.result)
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        except (SyncError, APIError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    click.echo()
    print_summary(result)
    if result.has_failures:
        sys.exit(1)


@click.command()
@click.option(
    "--interval",
    "-i",
    default=DEFAULT_WATCH_INTERVAL,
    show_default=True,
    type=click.IntRange(min=1),
    help="Seconds between upload passes.",
)
@click.option("--once", is_flag=True, help="Run a single upload pass and exit.")
def watch(interval: int, once: bool) -> None:
    """Upload pending photos in the background.

    Every interval, photos captured but not yet uploaded are pushed to the
    bucket. Failed uploads stay pending for the next pass.
    """
    with open_engine() as (engine, _store):
        if not once:
            click.echo(f"Uploading pending photos every {interval}s... (Ctrl+C to stop)\n")
        try:
            while True:
                summary = engine.upload_pending()
                if summary.uploaded or summary.failed:
                    click.echo(f"  ✓ {summary.uploaded} uploaded, {summary.failed} failed")
                if once:
                    break
                time.sleep(interval)
        except KeyboardInterrupt:
            click.echo("\nStopping...")
