"""Photo naming rules shared by the local store and the sync engine.

A player's photo is identified by its logical name: the player's display
name with "Last, First" swapped to "FirstLast", whitespace removed and
lowercased. The same logical photo may exist under several extensions;
PHOTO_EXTENSIONS lists them from highest to lowest precedence.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import PurePosixPath

# Captured photos are jpg, legacy downloads are png
PRIMARY_EXTENSION = ".jpg"
LEGACY_EXTENSION = ".png"
PHOTO_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png")

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}

_WHITESPACE = re.compile(r"\s+")


def logical_name(display_name: str) -> str:
    """Derive the logical photo name from a player's display name.

    Args:
        display_name: Name as shown on the roster, e.g. "Smith, Jane".

    Returns:
        Normalized identifier, e.g. "janesmith".
    """
    parts = (display_name or "").split(",")
    if len(parts) > 1:
        name = f"{parts[1].strip()}{parts[0].strip()}"
    else:
        name = display_name or ""
    return _WHITESPACE.sub("", name).lower()


def photo_file_name(display_name: str, extension: str = PRIMARY_EXTENSION) -> str:
    """Compose the photo file name for a player."""
    return f"{logical_name(display_name)}{extension}"


def normalize_basename(name: str) -> str:
    """Lowercase basename of a local path or remote object name."""
    return PurePosixPath(name.replace("\\", "/")).name.lower()


def logical_name_of(file_name: str) -> str:
    """Logical name of a file or object name (its lowercase stem)."""
    return PurePosixPath(normalize_basename(file_name)).stem


def extension_of(file_name: str) -> str:
    """Lowercase extension of a file or object name, including the dot."""
    return PurePosixPath(normalize_basename(file_name)).suffix


def is_photo_name(file_name: str) -> bool:
    """Check if a file name carries one of the accepted photo extensions."""
    return extension_of(file_name) in PHOTO_EXTENSIONS


def extension_rank(file_name: str) -> int:
    """Precedence of a file's extension (lower wins)."""
    ext = extension_of(file_name)
    if ext in PHOTO_EXTENSIONS:
        return PHOTO_EXTENSIONS.index(ext)
    return len(PHOTO_EXTENSIONS)


def content_type_for(file_name: str) -> str:
    """MIME type to upload a photo with."""
    return CONTENT_TYPES.get(extension_of(file_name), "image/jpeg")


def expected_file_names(logical_names: Iterable[str]) -> set[str]:
    """All file names under which the given logical photos may be stored."""
    return {
        f"{name}{ext}"
        for name in logical_names
        if name
        for ext in PHOTO_EXTENSIONS
    }
