"""Local photo commands for the tourneyphotos CLI.

Commands:
- add: Store a captured photo for a player and queue it for upload
- status: Show local photos, pending uploads and configuration state
- clean: Remove empty photos, or every local photo with --all
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from tourneyphotos.client.api import APIError
from tourneyphotos.client.cli.config import get_photo_dir, load_config
from tourneyphotos.client.store import LocalPhotoStore
from tourneyphotos.client.sync import SyncError
from tourneyphotos.core.config import is_configured


@click.command()
@click.argument("name")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--upload", is_flag=True, help="Upload right away instead of waiting for the next sync.")
def add(name: str, source: Path, upload: bool) -> None:
    """Store SOURCE as the photo of player NAME.

    NAME is the roster name, e.g. "Smith, Jane". The photo replaces any
    previous capture and stays pending until uploaded.
    """
    with LocalPhotoStore(get_photo_dir()) as store:
        dest = store.save_photo(name, source)
    click.echo(f"Saved {dest.name}")

    if not upload:
        return

    # Imported here so that `add` works without Supabase configured
    from tourneyphotos.client.cli.sync import open_engine

    with open_engine() as (engine, _store):
        try:
            url = engine.upload_photo(dest)
        except (SyncError, APIError) as e:
            click.echo(f"Warning: upload failed, photo stays pending: {e}", err=True)
            sys.exit(1)
    click.echo(f"Uploaded: {url}")


@click.command()
def status() -> None:
    """Show local photos, pending uploads and configuration state."""
    configured = is_configured(load_config())

    with LocalPhotoStore(get_photo_dir()) as store:
        records = store.records()
        duplicates = store.duplicates()
        root = store.root

    pending = [r for r in records if r.pending]

    click.echo(f"Photo directory: {root}")
    click.echo(f"Supabase: {'configured' if configured else 'not configured'}")
    click.echo(f"Local photos: {len(records)}")
    click.echo(f"Pending uploads: {len(pending)}")
    for record in pending:
        click.echo(f"  ↑ {record.file_name}")

    if duplicates:
        click.echo(click.style("\nSeveral files for the same player:", fg="yellow"))
        for paths in duplicates.values():
            kept, *others = paths
            click.echo(f"  ! {kept.name} (also {', '.join(p.name for p in others)})")


@click.command()
@click.option("--all", "clear_all", is_flag=True, help="Delete every local photo (remote copies stay).")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def clean(clear_all: bool, yes: bool) -> None:
    """Remove empty or corrupt local photos.

    With --all, every cached photo is deleted from this machine and the
    pending queue is emptied. Remote copies stay in the bucket.
    """
    with LocalPhotoStore(get_photo_dir()) as store:
        if clear_all:
            if not yes and not click.confirm("Delete all local photos?"):
                sys.exit(0)
            count = store.clear()
            click.echo(f"Deleted {count} local photos.")
            return

        removed = store.remove_empty()
    if not removed:
        click.echo("No empty photos found.")
        return
    click.echo(f"Removed {len(removed)} empty photos:")
    for path in removed:
        click.echo(f"  ✗ {path.name}")
