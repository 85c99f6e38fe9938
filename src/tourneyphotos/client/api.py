"""HTTP client for the Supabase Storage API.

This module provides:
- StorageClient: HTTP client for the photo bucket
- Object listing, upsert upload and streamed download
- is_transient_error: classification of retryable transport failures
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from tourneyphotos.core.config import StorageConfig

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 1000

# Statuses worth retrying: request timeout, rate limited, any server error
RETRYABLE_STATUS_CODES = frozenset({408, 429})


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Credentials rejected or access to the object denied."""


class NotFoundError(APIError):
    """Object or bucket not found."""


def is_retryable_status(status_code: int | None) -> bool:
    """Check if an HTTP status indicates a transient condition."""
    if status_code is None:
        return False
    return status_code in RETRYABLE_STATUS_CODES or status_code >= 500


def is_transient_error(exc: Exception) -> bool:
    """Classify an exception raised by a StorageClient call.

    Connection failures and timeouts (raised before any response was
    obtained) and API errors with a transient status are retryable.
    Other client errors (400, 401, 403, 404, ...) are permanent.
    """
    if isinstance(exc, APIError):
        return is_retryable_status(exc.status_code)
    return isinstance(exc, (httpx.TransportError, ConnectionError, TimeoutError))


def _error_detail(response: httpx.Response) -> str:
    """Extract an error message from a Supabase error body."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or data)
    return str(data)


class StorageClient:
    """HTTP client for one Supabase Storage bucket."""

    def __init__(self, config: StorageConfig) -> None:
        """Initialize the storage client.

        Args:
            config: Storage configuration (URL, key, bucket, timeout).
        """
        self._config = config
        self._bucket = config.bucket
        self._client = httpx.Client(
            base_url=config.url,
            timeout=config.timeout,
        )

    @property
    def config(self) -> StorageConfig:
        """Configuration this client was built with."""
        return self._config

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> StorageClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _auth_headers(self) -> dict[str, str]:
        return {
            "apikey": self._config.api_key,
            "Authorization": f"Bearer {self._config.api_key}",
        }

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Handle API response and raise appropriate exceptions."""
        if response.is_success:
            return response
        detail = _error_detail(response)
        message = f"{response.status_code}: {detail}"
        if response.status_code in (401, 403):
            raise AuthenticationError(message, response.status_code)
        if response.status_code == 404:
            raise NotFoundError(message, response.status_code)
        raise APIError(message, response.status_code)

    # === URLs ===

    def object_path(self, name: str, public: bool = False) -> str:
        """Path of an object relative to the base URL.

        Args:
            name: Object name in the bucket.
            public: Use the public (unauthenticated) object endpoint.
        """
        quoted = quote(name, safe="")
        if public:
            return f"/storage/v1/object/public/{self._bucket}/{quoted}"
        return f"/storage/v1/object/{self._bucket}/{quoted}"

    def public_url(self, name: str) -> str:
        """Absolute public URL of an object."""
        return f"{self._config.url}{self.object_path(name, public=True)}"

    # === Listing ===

    def list_objects(
        self,
        prefix: str = "",
        limit: int = LIST_PAGE_SIZE,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """List one page of objects in the bucket.

        Args:
            prefix: Folder prefix to list.
            limit: Page size.
            offset: Index of the first object to return.

        Returns:
            Raw object entries; an empty list if the body is not an array.
        """
        response = self._handle_response(
            self._client.post(
                f"/storage/v1/object/list/{self._bucket}",
                headers=self._auth_headers(),
                json={
                    "prefix": prefix,
                    "limit": limit,
                    "offset": offset,
                    "sortBy": {"column": "name", "order": "asc"},
                },
            )
        )
        data = response.json()
        if not isinstance(data, list):
            logger.warning(f"Unexpected list response for bucket {self._bucket}: {data!r}")
            return []
        return data

    # === Transfers ===

    def upload_object(self, name: str, data: bytes, content_type: str) -> str:
        """Upload (upsert) an object.

        Args:
            name: Object name in the bucket.
            data: Object content.
            content_type: MIME type of the content.

        Returns:
            Public URL of the uploaded object.
        """
        self._handle_response(
            self._client.post(
                self.object_path(name),
                content=data,
                headers={
                    **self._auth_headers(),
                    "Content-Type": content_type,
                    "x-upsert": "true",
                },
            )
        )
        return self.public_url(name)

    def download_object(
        self,
        name: str,
        target: Path,
        *,
        public: bool = True,
        authenticated: bool = False,
    ) -> int:
        """Download an object to a local file.

        The body is streamed to a temporary sibling file which replaces
        the target only once the response completed successfully.

        Args:
            name: Object name in the bucket.
            target: Local destination path.
            public: Use the public object endpoint.
            authenticated: Send the API key headers.

        Returns:
            Number of bytes written.
        """
        headers = self._auth_headers() if authenticated else None
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = target.with_suffix(target.suffix + ".tmp")

        try:
            with self._client.stream(
                "GET", self.object_path(name, public=public), headers=headers
            ) as response:
                if not response.is_success:
                    response.read()
                    self._handle_response(response)

                size = 0
                with open(tmp_path, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
                        size += len(chunk)

            tmp_path.replace(target)
            return size
        except Exception:
            if tmp_path.exists():
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
            raise
