"""Remote object directory.

This module provides:
- RemoteObject: An object of the photo bucket with its comparison keys
- RemoteDirectory: Lists the bucket through the request policy
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tourneyphotos.client.api import LIST_PAGE_SIZE, APIError
from tourneyphotos.client.sync.types import ListError
from tourneyphotos.core.naming import logical_name_of, normalize_basename

if TYPE_CHECKING:
    from tourneyphotos.client.api import StorageClient
    from tourneyphotos.client.sync.policy import RequestPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteObject:
    """An object in the photo bucket.

    Attributes:
        name: Object name as stored remotely.
        normalized: Lowercase basename used for comparisons.
    """

    name: str
    normalized: str

    @classmethod
    def from_name(cls, name: str) -> RemoteObject:
        """Create from a stored object name."""
        return cls(name=name, normalized=normalize_basename(name))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteObject:
        """Create from a list API entry."""
        return cls.from_name(str(data["name"]))

    @property
    def logical_name(self) -> str:
        """Logical photo name (lowercase stem)."""
        return logical_name_of(self.normalized)


class RemoteDirectory:
    """Lists the objects currently present in the photo bucket."""

    def __init__(
        self,
        client: StorageClient,
        policy: RequestPolicy,
        page_size: int = LIST_PAGE_SIZE,
    ) -> None:
        """Initialize the directory.

        Args:
            client: Storage client.
            policy: Rate limit and retry policy for list requests.
            page_size: Objects requested per page.
        """
        self._client = client
        self._policy = policy
        self._page_size = page_size

    def list(self) -> list[RemoteObject]:
        """List all objects of the bucket.

        Returns:
            Objects sorted by name, without folder placeholders.

        Raises:
            ListError: If a list request fails after retries.
        """
        objects: list[RemoteObject] = []
        offset = 0

        while True:
            try:
                page = self._policy.run(
                    lambda offset=offset: self._client.list_objects(
                        limit=self._page_size, offset=offset
                    ),
                    label="list photos",
                )
            except APIError as e:
                logger.warning(f"Remote listing failed ({e.status_code}): {e}")
                raise ListError(f"Listing failed: {e}", e.status_code) from e
            except Exception as e:
                raise ListError(f"Listing failed: {e}") from e

            for entry in page:
                name = entry.get("name") if isinstance(entry, dict) else None
                if not name or normalize_basename(str(name)).startswith("."):
                    continue
                objects.append(RemoteObject.from_dict(entry))

            if len(page) < self._page_size:
                break
            offset += self._page_size

        logger.info(f"Remote listing: {len(objects)} objects")
        if objects:
            sample = ", ".join(o.name for o in objects[:3])
            logger.debug(f"Remote listing sample: {sample}")
        return objects
