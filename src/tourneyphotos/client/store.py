"""Local photo store for the sync client.

This module provides:
- LocalPhotoStore: Directory of player photos plus a durable pending-upload queue
- PhotoRecord: A local photo and its upload state

Architecture:
    Photos live as plain files named after the player's logical name
    (`janesmith.jpg`). The pending-upload queue is an SQLite table next to
    the photos, so captures made while offline survive a restart.
"""

from __future__ import annotations

import logging
import shutil
import sqlite3
import threading
import time
from dataclasses import dataclass
from pathlib import Path

from tourneyphotos.core.naming import (
    PHOTO_EXTENSIONS,
    PRIMARY_EXTENSION,
    extension_rank,
    is_photo_name,
    logical_name,
    logical_name_of,
    photo_file_name,
)

logger = logging.getLogger(__name__)

STATE_DB_NAME = ".pending.db"

# Files at or below this size are treated as empty/corrupt by remove_empty()
EMPTY_PHOTO_SIZE = 512


@dataclass
class PhotoRecord:
    """A photo in the local store.

    Attributes:
        path: Absolute path of the file.
        file_name: Basename of the file (also its remote object name).
        pending: True while the upload has not been confirmed.
    """

    path: Path
    file_name: str
    pending: bool

    @property
    def logical_name(self) -> str:
        """Logical photo name (lowercase stem)."""
        return logical_name_of(self.file_name)


class LocalPhotoStore:
    """Directory of player photos with a persistent pending-upload queue."""

    def __init__(self, root: Path, db_path: Path | None = None) -> None:
        """Open (or create) a photo store.

        Args:
            root: Directory holding the photo files.
            db_path: SQLite file for the pending queue (default: inside root).
        """
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._db_path = Path(db_path) if db_path else self._root / STATE_DB_NAME
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        # Lock for thread-safe database access
        self._lock = threading.RLock()

        self._conn = sqlite3.connect(
            str(self._db_path),
            check_same_thread=False,
            isolation_level=None,  # Autocommit mode
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")

        self._create_tables()

    def _create_tables(self) -> None:
        """Create database tables if they don't exist."""
        self._conn.executescript("""
            -- Ordered queue of local paths awaiting upload
            CREATE TABLE IF NOT EXISTS pending_uploads (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                path TEXT NOT NULL UNIQUE,
                queued_at REAL NOT NULL
            );
        """)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> LocalPhotoStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def root(self) -> Path:
        """Directory holding the photo files."""
        return self._root

    def _key(self, path: Path | str) -> str:
        return str(Path(path).resolve())

    # === Files ===

    def list_all(self) -> list[Path]:
        """List every photo file in the store, sorted by name."""
        return sorted(
            p for p in self._root.iterdir()
            if p.is_file() and is_photo_name(p.name)
        )

    def records(self) -> list[PhotoRecord]:
        """List every photo with its pending flag."""
        pending = set(self.list_pending())
        return [
            PhotoRecord(path=p, file_name=p.name, pending=p in pending)
            for p in self.list_all()
        ]

    def local_logical_names(self) -> set[str]:
        """Logical names of all photos present locally."""
        return {logical_name_of(p.name) for p in self.list_all()}

    def photo_exists(self, display_name: str) -> Path | None:
        """Find the photo of a player.

        Extensions are checked in precedence order, so a captured `.jpg`
        wins over a legacy `.png` of the same player.

        Args:
            display_name: Player display name or logical name.

        Returns:
            Path of the photo, or None if the player has no local photo.
        """
        name = logical_name(display_name)
        for ext in PHOTO_EXTENSIONS:
            candidate = self._root / f"{name}{ext}"
            if candidate.is_file():
                return candidate
        return None

    def path_for(self, file_name: str) -> Path:
        """Absolute path a photo with this file name is stored at."""
        return self._root / Path(file_name).name

    def save_photo(self, display_name: str, source: Path) -> Path:
        """Store a captured photo and queue it for upload.

        Overwrites any previous capture of the same player.

        Args:
            display_name: Player display name.
            source: Image file to copy into the store.

        Returns:
            Path of the stored photo.
        """
        dest = self._root / photo_file_name(display_name, PRIMARY_EXTENSION)
        shutil.copyfile(source, dest)
        self.add_pending(dest)
        logger.info(f"Saved photo {dest.name}")
        return dest

    def delete_photo(self, path: Path) -> None:
        """Delete a photo file and drop it from the pending queue."""
        path = Path(path)
        path.unlink(missing_ok=True)
        self.mark_uploaded(path)
        logger.debug(f"Deleted local photo {path.name}")

    def clear(self) -> int:
        """Delete every local photo and empty the pending queue.

        Remote copies are untouched.

        Returns:
            Number of deleted photos.
        """
        photos = self.list_all()
        for path in photos:
            path.unlink(missing_ok=True)
        with self._lock:
            self._conn.execute("DELETE FROM pending_uploads")
        logger.info(f"Cleared {len(photos)} local photos")
        return len(photos)

    def remove_empty(self, max_size: int = EMPTY_PHOTO_SIZE) -> list[Path]:
        """Delete zero-byte or tiny photos left by failed captures or downloads.

        Args:
            max_size: Files of this size or smaller are removed.

        Returns:
            Paths that were removed.
        """
        removed = [p for p in self.list_all() if p.stat().st_size <= max_size]
        for path in removed:
            self.delete_photo(path)
        if removed:
            logger.info(f"Removed {len(removed)} empty photos")
        return removed

    def duplicates(self) -> dict[str, list[Path]]:
        """Logical names stored under more than one extension.

        The first path of each list is the authoritative one.
        """
        by_name: dict[str, list[Path]] = {}
        for path in self.list_all():
            by_name.setdefault(logical_name_of(path.name), []).append(path)
        return {
            name: sorted(paths, key=lambda p: extension_rank(p.name))
            for name, paths in by_name.items()
            if len(paths) > 1
        }

    # === Pending queue ===

    def add_pending(self, path: Path) -> None:
        """Queue a path for upload (no-op if already queued)."""
        with self._lock:
            self._conn.execute(
                "INSERT OR IGNORE INTO pending_uploads (path, queued_at) VALUES (?, ?)",
                (self._key(path), time.time()),
            )

    def list_pending(self) -> list[Path]:
        """Paths awaiting upload, oldest first."""
        with self._lock:
            cursor = self._conn.execute(
                "SELECT path FROM pending_uploads ORDER BY id"
            )
            rows = cursor.fetchall()
        return [Path(row["path"]) for row in rows]

    def is_pending(self, path: Path) -> bool:
        """Check if a path is waiting for upload."""
        with self._lock:
            cursor = self._conn.execute(
                "SELECT 1 FROM pending_uploads WHERE path = ?",
                (self._key(path),),
            )
            row = cursor.fetchone()
        return row is not None

    def mark_uploaded(self, path: Path) -> None:
        """Remove a path from the pending queue."""
        with self._lock:
            self._conn.execute(
                "DELETE FROM pending_uploads WHERE path = ?",
                (self._key(path),),
            )
