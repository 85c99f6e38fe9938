"""Photo download with content validation.

This module provides:
- PhotoDownloader: Fetches an object through the public/private URL chain
  and keeps it only if it passes the content validator
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from tourneyphotos.client.api import APIError
from tourneyphotos.client.sync.types import DownloadError, InvalidDownloadError
from tourneyphotos.client.sync.validator import is_valid_download
from tourneyphotos.core.naming import PHOTO_EXTENSIONS, normalize_basename

if TYPE_CHECKING:
    from tourneyphotos.client.api import StorageClient
    from tourneyphotos.client.sync.policy import RequestPolicy

logger = logging.getLogger(__name__)

# Statuses on the anonymous public URL that justify retrying it with the key
AUTH_FALLBACK_STATUSES = frozenset({400, 401, 403, 404})


@dataclass(frozen=True)
class FetchMode:
    """One step of the download URL chain."""

    label: str
    public: bool
    authenticated: bool


PUBLIC_NO_AUTH = FetchMode("public-no-auth", public=True, authenticated=False)
PUBLIC_WITH_AUTH = FetchMode("public-with-auth", public=True, authenticated=True)
PRIVATE_WITH_AUTH = FetchMode("private-with-auth", public=False, authenticated=True)

FETCH_CHAIN: tuple[FetchMode, ...] = (PUBLIC_NO_AUTH, PUBLIC_WITH_AUTH, PRIVATE_WITH_AUTH)


class PhotoDownloader:
    """Downloads photos into the local store directory."""

    def __init__(
        self,
        client: StorageClient,
        policy: RequestPolicy,
        target_dir: Path,
    ) -> None:
        """Initialize the downloader.

        Args:
            client: Storage client.
            policy: Rate limit and retry policy.
            target_dir: Directory downloaded photos are written to.
        """
        self._client = client
        self._policy = policy
        self._target_dir = Path(target_dir)

    def target_for(self, object_name: str) -> Path:
        """Local path of a remote object (prefix stripped, lowercased)."""
        return self._target_dir / normalize_basename(object_name)

    def fetch(self, object_name: str) -> Path:
        """Download an object and validate its content.

        The anonymous public URL is tried first. A 400/401/403/404 there
        leads to the public URL with the API key, and the authenticated
        private URL is the last resort. A file rejected by the validator is
        deleted and the next URL is tried.

        Args:
            object_name: Remote object name.

        Returns:
            Path of the validated local file.

        Raises:
            InvalidDownloadError: If the last attempt returned non-image bytes.
            DownloadError: If every URL failed, or the network failed after
                retries.
        """
        target = self.target_for(object_name)
        last_error: APIError | None = None
        last_invalid = False

        for mode in FETCH_CHAIN:
            if mode is PUBLIC_WITH_AUTH and (
                last_error is None or last_error.status_code not in AUTH_FALLBACK_STATUSES
            ):
                continue

            try:
                self._policy.run(
                    lambda mode=mode: self._client.download_object(
                        object_name,
                        target,
                        public=mode.public,
                        authenticated=mode.authenticated,
                    ),
                    label=f"download {object_name} ({mode.label})",
                )
            except APIError as e:
                logger.warning(
                    f"Download of {object_name} failed ({mode.label}, {e.status_code})"
                )
                last_error = e
                last_invalid = False
                continue
            except (httpx.TransportError, ConnectionError, TimeoutError) as e:
                # Retries are exhausted at this point
                raise DownloadError(
                    f"Download of {object_name} failed ({mode.label}, network): {e}"
                ) from e

            if is_valid_download(target):
                logger.info(f"Downloaded {object_name} ({mode.label})")
                return target

            logger.warning(f"Downloaded file invalid/HTML for {object_name} ({mode.label})")
            with contextlib.suppress(FileNotFoundError):
                target.unlink()
            last_error = None
            last_invalid = True

        if last_invalid:
            raise InvalidDownloadError(
                f"Download of {object_name} is not a valid image (html/too small)"
            )
        status = last_error.status_code if last_error else None
        raise DownloadError(f"Download of {object_name} failed ({status})") from last_error

    def fetch_logical(self, name: str) -> Path:
        """Download a photo by logical name, without a listing.

        Extensions are tried in precedence order; the first one found wins.

        Args:
            name: Logical photo name.

        Returns:
            Path of the validated local file.

        Raises:
            DownloadError: If no extension could be downloaded.
        """
        errors: list[str] = []
        for ext in PHOTO_EXTENSIONS:
            try:
                return self.fetch(f"{name}{ext}")
            except DownloadError as e:
                errors.append(str(e))
        raise DownloadError(f"No photo found for {name}: {'; '.join(errors)}")
