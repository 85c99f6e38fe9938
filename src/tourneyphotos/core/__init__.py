"""Core module - Shared configuration and naming rules."""

from tourneyphotos.core.config import (
    DEFAULT_BUCKET,
    DEFAULT_RATE_LIMIT_MS,
    ConfigError,
    ConfigInvalidError,
    ConfigMissingError,
    StorageConfig,
    is_configured,
)
from tourneyphotos.core.naming import (
    PHOTO_EXTENSIONS,
    content_type_for,
    expected_file_names,
    is_photo_name,
    logical_name,
    logical_name_of,
    normalize_basename,
    photo_file_name,
)

__all__ = [
    # Config
    "DEFAULT_BUCKET",
    "DEFAULT_RATE_LIMIT_MS",
    "ConfigError",
    "ConfigInvalidError",
    "ConfigMissingError",
    "StorageConfig",
    "is_configured",
    # Naming
    "PHOTO_EXTENSIONS",
    "content_type_for",
    "expected_file_names",
    "is_photo_name",
    "logical_name",
    "logical_name_of",
    "normalize_basename",
    "photo_file_name",
]
