"""Shared types and dataclasses for sync operations.

This module provides:
- SyncError, ListError, UploadError, DownloadError: Exception classes
- InvalidDownloadError: Downloaded bytes rejected by the validator
- SyncPhaseError: A whole sync phase failed
- UploadSummary, DownloadSummary, SyncResult: Operation results
- SyncPhase: Phases of a sync invocation
- Type aliases for callbacks
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class SyncError(Exception):
    """Base exception for sync errors."""


class ListError(SyncError):
    """Listing the remote bucket failed.

    Attributes:
        status_code: HTTP status returned by the backend (None if no response).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UploadError(SyncError):
    """Failed to upload a photo."""


class DownloadError(SyncError):
    """Failed to download a photo."""


class InvalidDownloadError(DownloadError):
    """Downloaded content is not an image (error page, empty body)."""


class SyncPhase(str, Enum):
    """Phase of a sync invocation."""

    IDLE = "idle"
    LISTING = "listing"
    DIFFING = "diffing"
    TRANSFERRING = "transferring"
    REPORTING = "reporting"


@dataclass
class UploadSummary:
    """Result of the upload phase."""

    uploaded: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class DownloadSummary:
    """Result of the download phase."""

    downloaded: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class SyncResult:
    """Result of a full sync operation.

    A zero `failed` count does not guarantee every roster player now has a
    photo: players absent from the bucket are neither failed nor skipped.
    """

    uploaded: int = 0
    downloaded: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @classmethod
    def merge(
        cls,
        download: DownloadSummary | None,
        upload: UploadSummary | None,
    ) -> SyncResult:
        """Combine phase summaries; failed counts add up."""
        download = download or DownloadSummary()
        upload = upload or UploadSummary()
        return cls(
            uploaded=upload.uploaded,
            downloaded=download.downloaded,
            skipped=download.skipped,
            failed=download.failed + upload.failed,
            errors=[*download.errors, *upload.errors],
        )

    @property
    def has_failures(self) -> bool:
        """Check if any item failed."""
        return self.failed > 0


class SyncPhaseError(SyncError):
    """A whole phase of run_full_sync failed.

    Attributes:
        phase: Name of the failed phase ("download" or "upload").
        cause: The exception that aborted the phase.
        result: Counts of everything that did complete.
    """

    def __init__(self, phase: str, cause: Exception, result: SyncResult) -> None:
        self.phase = phase
        self.cause = cause
        self.result = result
        super().__init__(f"{phase} phase failed: {cause}")


# Progress messages such as "Uploading 2/5"
ProgressCallback = Callable[[str], None]

PhaseCallback = Callable[[SyncPhase], None]
