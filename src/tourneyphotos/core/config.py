"""Storage configuration for tourneyphotos.

This module defines the configuration used by the HTTP client and the sync
engine to reach the Supabase Storage bucket.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_BUCKET = "tournament-players"
DEFAULT_RATE_LIMIT_MS = 200
DEFAULT_TIMEOUT = 30.0

# Environment variables take precedence over the config file
ENV_URL = "SUPABASE_URL"
ENV_KEY = "SUPABASE_ANON_KEY"
ENV_BUCKET = "SUPABASE_BUCKET"
ENV_RATE_LIMIT = "RATE_LIMIT_MS"


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigMissingError(ConfigError):
    """Storage URL or API key is not configured."""


class ConfigInvalidError(ConfigError):
    """A configured value cannot be used."""


@dataclass
class StorageConfig:
    """Configuration for connecting to a Supabase Storage bucket.

    Attributes:
        url: Base URL of the Supabase project (e.g., "https://xyz.supabase.co").
        api_key: Anon or service key, sent as `apikey` and bearer token.
        bucket: Storage bucket holding the player photos.
        rate_limit_ms: Minimum spacing between two requests, in milliseconds.
        timeout: Request timeout in seconds.
    """

    url: str
    api_key: str
    bucket: str = DEFAULT_BUCKET
    rate_limit_ms: int = DEFAULT_RATE_LIMIT_MS
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate credentials and normalize the base URL."""
        if not self.url or not self.api_key:
            raise ConfigMissingError(
                "Supabase is not configured: set SUPABASE_URL and SUPABASE_ANON_KEY "
                "or run 'tourneyphotos configure'."
            )
        self.url = self.url.rstrip("/")

    @property
    def rate_limit_seconds(self) -> float:
        """Minimum request spacing in seconds."""
        return self.rate_limit_ms / 1000.0

    @property
    def key_prefix(self) -> str:
        """Short, loggable prefix of the API key."""
        return self.api_key[:8]

    @classmethod
    def resolve(
        cls,
        file_config: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> StorageConfig:
        """Build a config from the environment, falling back to the config file.

        Args:
            file_config: Values loaded from config.json.
            environ: Environment mapping (defaults to os.environ).

        Returns:
            A validated StorageConfig.

        Raises:
            ConfigMissingError: If the URL or the API key is missing.
            ConfigInvalidError: If the rate limit is not a non-negative integer.
        """
        file_config = file_config or {}
        environ = os.environ if environ is None else environ

        rate_limit = environ.get(ENV_RATE_LIMIT)
        if not rate_limit:
            rate_limit = file_config.get("rate_limit_ms")
        return cls(
            url=environ.get(ENV_URL) or file_config.get("supabase_url") or "",
            api_key=environ.get(ENV_KEY) or file_config.get("supabase_key") or "",
            bucket=environ.get(ENV_BUCKET) or file_config.get("bucket") or DEFAULT_BUCKET,
            rate_limit_ms=_parse_rate_limit(rate_limit),
        )


def _parse_rate_limit(value: Any) -> int:
    """Rate limit in milliseconds; None or an empty string means the default."""
    if value is None or value == "":
        return DEFAULT_RATE_LIMIT_MS
    try:
        rate_limit = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigInvalidError(f"Invalid rate limit: {value!r} (expected milliseconds)") from e
    if rate_limit < 0:
        raise ConfigInvalidError(f"Invalid rate limit: {rate_limit} (must be >= 0)")
    return rate_limit


def is_configured(
    file_config: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> bool:
    """Check whether storage credentials are available."""
    try:
        StorageConfig.resolve(file_config, environ)
    except ConfigError:
        return False
    return True
