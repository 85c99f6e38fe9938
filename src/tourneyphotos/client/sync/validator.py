"""Validation of downloaded photo files.

Some storage misconfigurations answer object requests with an HTML error
page and a success status, so the HTTP status alone cannot be trusted.
Downloaded files are sniffed before being kept.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

MIN_IMAGE_SIZE = 1024
# Only files up to this size are scanned for error-page text
TEXT_SCAN_MAX_SIZE = 512 * 1024
TEXT_SCAN_BYTES = 4096

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SOI = b"\xff\xd8\xff"

ERROR_PAGE_MARKERS = (
    "<html",
    "<!doctype",
    "access denied",
    "signature does not match",
)


def looks_like_image(head: bytes) -> bool:
    """Check leading bytes against the PNG and JPEG signatures."""
    return head.startswith(PNG_SIGNATURE) or head.startswith(JPEG_SOI)


def contains_error_page(head: bytes) -> bool:
    """Check leading bytes for markers of an HTML or access-denied body."""
    text = head.decode("utf-8", errors="ignore").lower()
    return any(marker in text for marker in ERROR_PAGE_MARKERS)


def is_valid_download(path: Path) -> bool:
    """Check that a downloaded file is a real image.

    Args:
        path: Downloaded file.

    Returns:
        False if the file is missing, smaller than MIN_IMAGE_SIZE, does not
        start with an image signature, or (for small files) contains
        error-page text.
    """
    path = Path(path)
    if not path.is_file():
        return False

    size = path.stat().st_size
    if size < MIN_IMAGE_SIZE:
        logger.debug(f"{path.name}: {size} bytes, too small for a photo")
        return False

    try:
        with open(path, "rb") as f:
            head = f.read(TEXT_SCAN_BYTES)
    except OSError as e:
        # Size is known to be reasonable; accept what cannot be inspected
        logger.warning(f"Could not inspect {path.name}: {e}")
        return size > MIN_IMAGE_SIZE

    if not looks_like_image(head):
        logger.debug(f"{path.name}: no PNG/JPEG signature")
        return False

    if size <= TEXT_SCAN_MAX_SIZE and contains_error_page(head):
        logger.debug(f"{path.name}: error page content")
        return False

    return True
