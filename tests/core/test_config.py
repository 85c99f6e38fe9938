"""Tests for storage configuration."""

from __future__ import annotations

import pytest

from tourneyphotos.core.config import (
    DEFAULT_BUCKET,
    ConfigInvalidError,
    ConfigMissingError,
    StorageConfig,
    is_configured,
)


class TestStorageConfig:
    """Tests for StorageConfig class."""

    def test_init_basic(self) -> None:
        """Should initialize with required fields and defaults."""
        config = StorageConfig(url="https://xyz.supabase.co", api_key="anon-key")
        assert config.url == "https://xyz.supabase.co"
        assert config.api_key == "anon-key"
        assert config.bucket == DEFAULT_BUCKET
        assert config.rate_limit_ms == 200
        assert config.timeout == 30.0

    def test_url_trailing_slash_removed(self) -> None:
        """Should strip trailing slash from the URL."""
        config = StorageConfig(url="https://xyz.supabase.co/", api_key="anon-key")
        assert config.url == "https://xyz.supabase.co"

    def test_missing_url_fails_fast(self) -> None:
        """A missing URL should raise before anything else happens."""
        with pytest.raises(ConfigMissingError, match="not configured"):
            StorageConfig(url="", api_key="anon-key")

    def test_missing_key_fails_fast(self) -> None:
        """A missing key should raise before anything else happens."""
        with pytest.raises(ConfigMissingError):
            StorageConfig(url="https://xyz.supabase.co", api_key="")

    def test_rate_limit_seconds(self) -> None:
        """Should convert the rate limit to seconds."""
        config = StorageConfig(url="https://x.co", api_key="k", rate_limit_ms=150)
        assert config.rate_limit_seconds == pytest.approx(0.15)

    def test_key_prefix(self) -> None:
        """Only the first characters of the key should be exposed."""
        config = StorageConfig(url="https://x.co", api_key="abcdefghijklmnop")
        assert config.key_prefix == "abcdefgh"


class TestResolve:
    """Tests for StorageConfig.resolve."""

    def test_from_file(self) -> None:
        """Should read values from the config file mapping."""
        config = StorageConfig.resolve(
            {
                "supabase_url": "https://file.supabase.co",
                "supabase_key": "file-key",
                "bucket": "photos",
                "rate_limit_ms": 300,
            },
            environ={},
        )
        assert config.url == "https://file.supabase.co"
        assert config.api_key == "file-key"
        assert config.bucket == "photos"
        assert config.rate_limit_ms == 300

    def test_environment_overrides_file(self) -> None:
        """Environment variables should take precedence."""
        config = StorageConfig.resolve(
            {"supabase_url": "https://file.supabase.co", "supabase_key": "file-key"},
            environ={
                "SUPABASE_URL": "https://env.supabase.co",
                "SUPABASE_ANON_KEY": "env-key",
                "RATE_LIMIT_MS": "175",
            },
        )
        assert config.url == "https://env.supabase.co"
        assert config.api_key == "env-key"
        assert config.bucket == DEFAULT_BUCKET
        assert config.rate_limit_ms == 175

    def test_nothing_configured(self) -> None:
        """Should raise when neither source provides credentials."""
        with pytest.raises(ConfigMissingError):
            StorageConfig.resolve({}, environ={})

    def test_is_configured(self) -> None:
        """is_configured should reflect whether credentials are available."""
        assert is_configured({}, environ={}) is False
        assert is_configured(
            {}, environ={"SUPABASE_URL": "https://x.co", "SUPABASE_ANON_KEY": "k"}
        ) is True

    def test_zero_rate_limit_from_file(self) -> None:
        """A stored rate limit of 0 should disable spacing, not fall back."""
        config = StorageConfig.resolve(
            {"supabase_url": "https://x.co", "supabase_key": "k", "rate_limit_ms": 0},
            environ={},
        )
        assert config.rate_limit_ms == 0

    def test_zero_rate_limit_from_environment(self) -> None:
        """RATE_LIMIT_MS=0 should override the file value."""
        config = StorageConfig.resolve(
            {"supabase_url": "https://x.co", "supabase_key": "k", "rate_limit_ms": 300},
            environ={"RATE_LIMIT_MS": "0"},
        )
        assert config.rate_limit_ms == 0

    @pytest.mark.parametrize("value", ["fast", "1.5", "-10"])
    def test_invalid_rate_limit(self, value: str) -> None:
        """A rate limit that is not a non-negative integer should be rejected."""
        with pytest.raises(ConfigInvalidError, match="Invalid rate limit"):
            StorageConfig.resolve(
                {"supabase_url": "https://x.co", "supabase_key": "k"},
                environ={"RATE_LIMIT_MS": value},
            )
