"""Photo synchronization between the local store and the remote bucket.

Architecture:
    SyncEngine → RemoteDirectory / LocalPhotoStore → plan_downloads
    → RequestPolicy (retry → RateLimitGate) → StorageClient

Components:
- **RateLimitGate**: Serializes requests with a minimum spacing
- **retry_with_backoff**: Bounded exponential backoff retry
- **RequestPolicy**: Retry wrapped around the gate, used for every request
- **is_valid_download**: Rejects error pages and truncated downloads
- **RemoteDirectory**: Lists the bucket with normalized names
- **plan_downloads**: Pure diff between remote listing and local photos
- **PhotoUploader / PhotoDownloader**: Single-photo transfers
- **SyncEngine**: Orchestrates the download and upload phases
"""

from tourneyphotos.client.sync.download import FETCH_CHAIN, FetchMode, PhotoDownloader
from tourneyphotos.client.sync.engine import SyncEngine
from tourneyphotos.client.sync.gate import DEFAULT_MIN_INTERVAL, RateLimitGate
from tourneyphotos.client.sync.planner import (
    DownloadPlan,
    FallbackMode,
    dedupe_by_logical_name,
    plan_downloads,
)
from tourneyphotos.client.sync.policy import RequestPolicy
from tourneyphotos.client.sync.remote import RemoteDirectory, RemoteObject
from tourneyphotos.client.sync.retry import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_INITIAL_BACKOFF,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_BACKOFF,
    NETWORK_EXCEPTIONS,
    backoff_delay,
    is_network_error,
    retry_with_backoff,
)
from tourneyphotos.client.sync.types import (
    DownloadError,
    DownloadSummary,
    InvalidDownloadError,
    ListError,
    PhaseCallback,
    ProgressCallback,
    SyncError,
    SyncPhase,
    SyncPhaseError,
    SyncResult,
    UploadError,
    UploadSummary,
)
from tourneyphotos.client.sync.upload import PhotoUploader
from tourneyphotos.client.sync.validator import (
    MIN_IMAGE_SIZE,
    is_valid_download,
)

__all__ = [
    # Retry functions and constants
    "DEFAULT_BACKOFF_MULTIPLIER",
    "DEFAULT_INITIAL_BACKOFF",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_BACKOFF",
    "NETWORK_EXCEPTIONS",
    "backoff_delay",
    "is_network_error",
    "retry_with_backoff",
    # Gate and policy
    "DEFAULT_MIN_INTERVAL",
    "RateLimitGate",
    "RequestPolicy",
    # Types and dataclasses
    "DownloadError",
    "DownloadSummary",
    "InvalidDownloadError",
    "ListError",
    "PhaseCallback",
    "ProgressCallback",
    "SyncError",
    "SyncPhase",
    "SyncPhaseError",
    "SyncResult",
    "UploadError",
    "UploadSummary",
    # Validation
    "MIN_IMAGE_SIZE",
    "is_valid_download",
    # Remote listing and planning
    "DownloadPlan",
    "FallbackMode",
    "RemoteDirectory",
    "RemoteObject",
    "dedupe_by_logical_name",
    "plan_downloads",
    # Transfers
    "FETCH_CHAIN",
    "FetchMode",
    "PhotoDownloader",
    "PhotoUploader",
    # Engine
    "SyncEngine",
]
