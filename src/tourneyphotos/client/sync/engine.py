"""Sync engine coordinating photo synchronization.

This module provides:
- SyncEngine: Reconciles the local photo store with the remote bucket

The engine keeps no state of its own between invocations. Pending uploads
live in the local store and remote objects in the bucket, so an interrupted
sync is resumed simply by running it again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from tourneyphotos.client.sync.download import PhotoDownloader
from tourneyphotos.client.sync.gate import RateLimitGate
from tourneyphotos.client.sync.planner import DownloadPlan, FallbackMode, plan_downloads
from tourneyphotos.client.sync.policy import RequestPolicy
from tourneyphotos.client.sync.remote import RemoteDirectory
from tourneyphotos.client.sync.types import (
    DownloadSummary,
    ListError,
    PhaseCallback,
    ProgressCallback,
    SyncPhase,
    SyncPhaseError,
    SyncResult,
    UploadSummary,
)
from tourneyphotos.client.sync.upload import PhotoUploader

if TYPE_CHECKING:
    from tourneyphotos.client.api import StorageClient
    from tourneyphotos.client.store import LocalPhotoStore

logger = logging.getLogger(__name__)


class SyncEngine:
    """Coordinates photo synchronization between the local store and the bucket."""

    def __init__(
        self,
        client: StorageClient,
        store: LocalPhotoStore,
        policy: RequestPolicy | None = None,
        phase_callback: PhaseCallback | None = None,
    ) -> None:
        """Initialize the sync engine.

        Args:
            client: Storage client for the photo bucket.
            store: Local photo store (files and pending queue).
            policy: Rate limit and retry policy; by default a fresh gate
                spaced by the client's configured rate limit.
            phase_callback: Optional callback on every phase change.
        """
        if policy is None:
            policy = RequestPolicy(gate=RateLimitGate(client.config.rate_limit_seconds))
        self._client = client
        self._store = store
        self._policy = policy
        self._phase_callback = phase_callback
        self._phase = SyncPhase.IDLE
        self._directory = RemoteDirectory(client, policy)
        self._uploader = PhotoUploader(client, policy)
        self._downloader = PhotoDownloader(client, policy, store.root)

    @property
    def phase(self) -> SyncPhase:
        """Current phase of the running invocation."""
        return self._phase

    @property
    def bucket(self) -> str:
        """Name of the remote bucket."""
        return self._client.config.bucket

    @property
    def directory(self) -> RemoteDirectory:
        """Remote object directory used by the engine."""
        return self._directory

    def _enter(self, phase: SyncPhase) -> None:
        self._phase = phase
        logger.debug(f"Sync phase: {phase.value}")
        if self._phase_callback:
            self._phase_callback(phase)

    # === Public operations ===

    def upload_pending(self, on_progress: ProgressCallback | None = None) -> UploadSummary:
        """Upload every photo of the pending queue.

        Photos not in the queue are never uploaded, even if the bucket
        lacks them.

        Args:
            on_progress: Optional callback receiving "Uploading i/N".

        Returns:
            Upload counts.
        """
        try:
            self._enter(SyncPhase.LISTING)
            pending = self._store.list_pending()

            self._enter(SyncPhase.DIFFING)
            logger.info(f"{len(pending)} photos pending upload")

            self._enter(SyncPhase.TRANSFERRING)
            summary = self._upload_all(pending, on_progress)

            self._enter(SyncPhase.REPORTING)
            logger.info(f"Upload complete: {summary.uploaded} uploaded, {summary.failed} failed")
            return summary
        finally:
            self._enter(SyncPhase.IDLE)

    def download_missing(
        self,
        on_progress: ProgressCallback | None = None,
        expected_names: Iterable[str] | None = None,
    ) -> DownloadSummary:
        """Download remote photos that are missing locally.

        Args:
            on_progress: Optional callback receiving "Downloading i/N".
            expected_names: Roster names; restricts downloads to their photos.

        Returns:
            Download counts.

        Raises:
            ListError: If the remote listing fails.
        """
        try:
            self._enter(SyncPhase.LISTING)
            remote = self._directory.list()
            local = self._store.list_all()

            self._enter(SyncPhase.DIFFING)
            plan = plan_downloads(remote, local, expected_names)

            self._enter(SyncPhase.TRANSFERRING)
            summary = self._download_all(plan, on_progress)

            self._enter(SyncPhase.REPORTING)
            self._log_download_summary(summary, plan)
            return summary
        finally:
            self._enter(SyncPhase.IDLE)

    def run_full_sync(
        self,
        on_progress: ProgressCallback | None = None,
        expected_names: Iterable[str] | None = None,
    ) -> SyncResult:
        """Download missing photos, then upload pending ones.

        Downloads run first so local gaps are filled before local state is
        pushed out. A listing failure skips the downloads but not the
        uploads; it is raised once both phases are done.

        Args:
            on_progress: Optional progress callback.
            expected_names: Roster names restricting the downloads.

        Returns:
            Merged counts of both phases.

        Raises:
            SyncPhaseError: If the download phase could not run; the partial
                result is attached.
        """
        download_error: ListError | None = None
        plan: DownloadPlan | None = None

        try:
            self._enter(SyncPhase.LISTING)
            remote = None
            try:
                remote = self._directory.list()
            except ListError as e:
                logger.error(f"Download phase aborted: {e}")
                download_error = e
            local = self._store.list_all()
            pending = self._store.list_pending()

            self._enter(SyncPhase.DIFFING)
            if remote is not None:
                plan = plan_downloads(remote, local, expected_names)

            self._enter(SyncPhase.TRANSFERRING)
            download = self._download_all(plan, on_progress) if plan is not None else None
            upload = self._upload_all(pending, on_progress)

            self._enter(SyncPhase.REPORTING)
            result = SyncResult.merge(download, upload)
            logger.info(
                f"Sync complete: {result.downloaded} downloaded, {result.uploaded} uploaded, "
                f"{result.skipped} skipped, {result.failed} failed"
            )
            if download_error is not None:
                raise SyncPhaseError("download", download_error, result)
            return result
        finally:
            self._enter(SyncPhase.IDLE)

    def upload_photo(self, path: Path) -> str:
        """Upload a single photo right away and dequeue it.

        Args:
            path: Photo in the local store.

        Returns:
            Public URL of the uploaded photo.
        """
        url = self._uploader.upload(path)
        self._store.mark_uploaded(path)
        return url

    # === Transfers ===

    def _upload_all(
        self,
        pending: list[Path],
        on_progress: ProgressCallback | None,
    ) -> UploadSummary:
        summary = UploadSummary()
        total = len(pending)

        for i, path in enumerate(pending, start=1):
            if on_progress:
                on_progress(f"Uploading {i}/{total}")
            try:
                self._uploader.upload(path)
                self._store.mark_uploaded(path)
                summary.uploaded += 1
            except Exception as e:
                logger.warning(f"Upload failed for {path.name}: {e}")
                summary.failed += 1
                summary.errors.append(f"{path.name}: {e}")

        return summary

    def _download_all(
        self,
        plan: DownloadPlan,
        on_progress: ProgressCallback | None,
    ) -> DownloadSummary:
        summary = DownloadSummary(skipped=plan.skipped)

        if plan.fallback is FallbackMode.DIRECT_FETCH:
            jobs = [(name, self._downloader.fetch_logical) for name in plan.direct_names]
        else:
            jobs = [(obj.name, self._downloader.fetch) for obj in plan.to_download]

        total = len(jobs)
        for i, (name, fetch) in enumerate(jobs, start=1):
            if on_progress:
                on_progress(f"Downloading {i}/{total}")
            try:
                fetch(name)
                summary.downloaded += 1
            except Exception as e:
                logger.warning(f"Download failed for {name}: {e}")
                summary.failed += 1
                summary.errors.append(f"{name}: {e}")

        return summary

    def _log_download_summary(self, summary: DownloadSummary, plan: DownloadPlan) -> None:
        logger.info(
            f"Download complete: {summary.downloaded} downloaded, {summary.skipped} skipped, "
            f"{summary.failed} failed (fallback: {plan.fallback.value})"
        )
