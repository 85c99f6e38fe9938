"""Download planning: which remote photos are missing locally.

plan_downloads is a pure function of the remote listing, the local file
names and the optional roster; the engine only executes the plan.

Two fallbacks exist for storage backends whose listing cannot be trusted:

- FallbackMode.ALL_REMOTE: the roster filter matched nothing although the
  bucket is not empty. Object names probably follow another convention, so
  every remote object becomes a candidate (over-fetching beats missing
  photos). Only objects with a photo extension are ever candidates.
- FallbackMode.DIRECT_FETCH: the listing is empty but a roster was given.
  Listing permissions may be missing while object reads still work, so
  each roster player without a local photo is fetched by name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from tourneyphotos.client.sync.remote import RemoteObject
from tourneyphotos.core.naming import (
    expected_file_names,
    extension_rank,
    is_photo_name,
    logical_name,
    logical_name_of,
)

logger = logging.getLogger(__name__)


class FallbackMode(str, Enum):
    """How the candidate set was chosen."""

    NONE = "none"
    ALL_REMOTE = "all_remote"
    DIRECT_FETCH = "direct_fetch"


@dataclass
class DownloadPlan:
    """What the download phase has to do.

    Attributes:
        to_download: Remote objects missing locally, one per logical name.
        skipped: Candidates already present locally.
        direct_names: Logical names to fetch without a listing
            (only with FallbackMode.DIRECT_FETCH).
        fallback: Which fallback, if any, produced the candidates.
    """

    to_download: list[RemoteObject] = field(default_factory=list)
    skipped: int = 0
    direct_names: list[str] = field(default_factory=list)
    fallback: FallbackMode = FallbackMode.NONE

    @property
    def total(self) -> int:
        """Number of transfers the plan requires."""
        return len(self.to_download) + len(self.direct_names)


def dedupe_by_logical_name(objects: Iterable[RemoteObject]) -> list[RemoteObject]:
    """Keep one object per logical name, by extension precedence.

    Order of first appearance is preserved.
    """
    chosen: dict[str, RemoteObject] = {}
    for obj in objects:
        current = chosen.get(obj.logical_name)
        if current is None or extension_rank(obj.normalized) < extension_rank(current.normalized):
            chosen[obj.logical_name] = obj
    return list(chosen.values())


def plan_downloads(
    remote: list[RemoteObject],
    local_paths: Iterable[Path],
    expected_names: Iterable[str] | None = None,
) -> DownloadPlan:
    """Compute the downloads needed to fill local gaps.

    Remote objects without a photo extension are never candidates, with or
    without a roster.

    Args:
        remote: Current bucket listing.
        local_paths: Photos present locally.
        expected_names: Roster display names or logical names; when given,
            only their photos are candidates.

    Returns:
        The download plan.
    """
    local_names = {
        logical_name_of(p.name) for p in local_paths if is_photo_name(p.name)
    }
    roster = [n for n in dict.fromkeys(logical_name(e) for e in expected_names or []) if n]

    # Local presence only counts photo files, so only photos are candidates
    ignored = [obj.name for obj in remote if not is_photo_name(obj.normalized)]
    if ignored:
        logger.debug(f"Ignoring {len(ignored)} non-photo remote objects: {', '.join(ignored[:5])}")
        remote = [obj for obj in remote if is_photo_name(obj.normalized)]

    if not roster:
        return _plan_from_candidates(remote, local_names, FallbackMode.NONE)

    if not remote:
        return _direct_fetch_plan(roster, local_names)

    expected = expected_file_names(roster)
    candidates = [obj for obj in remote if obj.normalized in expected]
    fallback = FallbackMode.NONE
    if not candidates:
        logger.warning(
            f"No remote object matches the {len(roster)} roster names; "
            f"considering all {len(remote)} remote objects"
        )
        candidates = remote
        fallback = FallbackMode.ALL_REMOTE

    logger.info(
        f"Download filter: players={len(roster)} expected={len(expected)} "
        f"remote={len(remote)} candidates={len(candidates)}"
    )
    return _plan_from_candidates(candidates, local_names, fallback)


def _plan_from_candidates(
    candidates: list[RemoteObject],
    local_names: set[str],
    fallback: FallbackMode,
) -> DownloadPlan:
    unique = dedupe_by_logical_name(candidates)
    missing = [obj for obj in unique if obj.logical_name not in local_names]
    return DownloadPlan(
        to_download=missing,
        skipped=len(unique) - len(missing),
        fallback=fallback,
    )


def _direct_fetch_plan(roster: list[str], local_names: set[str]) -> DownloadPlan:
    missing = [name for name in roster if name not in local_names]
    logger.warning(
        f"Remote listing is empty; fetching {len(missing)} roster photos directly"
    )
    return DownloadPlan(
        skipped=len(roster) - len(missing),
        direct_names=missing,
        fallback=FallbackMode.DIRECT_FETCH,
    )
