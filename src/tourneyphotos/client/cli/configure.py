"""Configure command for the tourneyphotos CLI.

Commands:
- configure: Store Supabase credentials and the photo directory
"""

from __future__ import annotations

from pathlib import Path

import click

from tourneyphotos.client.cli.config import get_config_file, load_config, mask_key, save_config


@click.command()
@click.option("--url", default=None, help="Supabase project URL (e.g., https://xyz.supabase.co).")
@click.option("--key", default=None, help="Supabase anon key.")
@click.option("--bucket", default=None, help="Storage bucket holding the photos.")
@click.option(
    "--photo-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Local photo directory.",
)
@click.option("--rate-limit-ms", default=None, type=click.IntRange(min=0), help="Minimum spacing between requests.")
def configure(
    url: str | None,
    key: str | None,
    bucket: str | None,
    photo_dir: Path | None,
    rate_limit_ms: int | None,
) -> None:
    """Store Supabase credentials and local settings.

    Environment variables (SUPABASE_URL, SUPABASE_ANON_KEY, SUPABASE_BUCKET,
    RATE_LIMIT_MS) override the stored values.
    """
    config = load_config()

    if url is not None:
        config["supabase_url"] = url.rstrip("/")
    if key is not None:
        config["supabase_key"] = key
    if bucket is not None:
        config["bucket"] = bucket
    if photo_dir is not None:
        config["photo_dir"] = str(photo_dir.expanduser().resolve())
    if rate_limit_ms is not None:
        config["rate_limit_ms"] = rate_limit_ms

    save_config(config)

    click.echo(f"Configuration saved to {get_config_file()}")
    click.echo(f"URL: {config.get('supabase_url') or 'missing'}")
    click.echo(f"Key: {mask_key(config.get('supabase_key'))}")
    if config.get("bucket"):
        click.echo(f"Bucket: {config['bucket']}")
    if config.get("photo_dir"):
        click.echo(f"Photo directory: {config['photo_dir']}")
