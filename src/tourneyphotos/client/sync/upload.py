"""Photo upload.

This module provides:
- PhotoUploader: Uploads a local photo with upsert semantics
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tourneyphotos.client.sync.types import UploadError
from tourneyphotos.core.naming import content_type_for

if TYPE_CHECKING:
    from tourneyphotos.client.api import StorageClient
    from tourneyphotos.client.sync.policy import RequestPolicy

logger = logging.getLogger(__name__)


class PhotoUploader:
    """Uploads local photos to the bucket.

    Objects are written with `x-upsert`, so uploading a photo again after a
    new capture overwrites the remote copy.
    """

    def __init__(self, client: StorageClient, policy: RequestPolicy) -> None:
        """Initialize the uploader.

        Args:
            client: Storage client.
            policy: Rate limit and retry policy.
        """
        self._client = client
        self._policy = policy

    def upload(self, local_path: Path, object_name: str | None = None) -> str:
        """Upload a photo.

        Args:
            local_path: Photo to upload.
            object_name: Remote name (default: the file's basename).

        Returns:
            Public URL of the uploaded object.

        Raises:
            UploadError: If the file does not exist.
            APIError: If the upload is rejected or retries are exhausted.
        """
        local_path = Path(local_path)
        if not local_path.is_file():
            raise UploadError(f"File not found: {local_path}")

        name = object_name or local_path.name
        data = local_path.read_bytes()
        content_type = content_type_for(name)

        logger.info(f"Uploading {name} ({len(data)} bytes)")
        url = self._policy.run(
            lambda: self._client.upload_object(name, data, content_type),
            label=f"upload {name}",
        )
        logger.debug(f"Uploaded {name} to {url}")
        return url
