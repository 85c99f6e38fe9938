"""Tests for download planning."""

from pathlib import Path

from tourneyphotos.client.sync.planner import (
    FallbackMode,
    dedupe_by_logical_name,
    plan_downloads,
)
from tourneyphotos.client.sync.remote import RemoteObject


def remote(*names: str) -> list[RemoteObject]:
    """Build a remote listing from object names."""
    return [RemoteObject.from_name(n) for n in names]


def local(*names: str) -> list[Path]:
    """Build local photo paths from file names."""
    return [Path("/photos") / n for n in names]


class TestPlanDownloads:
    """Tests for plan_downloads."""

    def test_missing_photo_is_planned(self) -> None:
        """Remote photos absent locally should be downloaded."""
        plan = plan_downloads(remote("alice.png", "bob.jpg"), local("alice.jpg"))

        assert [o.name for o in plan.to_download] == ["bob.jpg"]
        assert plan.skipped == 1
        assert plan.fallback is FallbackMode.NONE

    def test_extension_does_not_matter(self) -> None:
        """A local photo under another extension counts as present."""
        plan = plan_downloads(remote("Alice.PNG"), local("alice.jpg"))

        assert plan.to_download == []
        assert plan.skipped == 1

    def test_non_photo_files_ignored_locally(self) -> None:
        """Only local image files count as present."""
        plan = plan_downloads(remote("alice.jpg"), local("alice.txt"))
        assert [o.name for o in plan.to_download] == ["alice.jpg"]

    def test_roster_filter(self) -> None:
        """With a roster only its players' photos are candidates."""
        plan = plan_downloads(
            remote("alice.jpg", "bob.png", "carol.jpg"),
            local(),
            expected_names=["Alice", "Smith, Bob"],
        )

        assert [o.name for o in plan.to_download] == ["alice.jpg"]
        assert plan.fallback is FallbackMode.NONE

    def test_roster_with_display_names(self) -> None:
        """Roster display names should be converted to logical names."""
        plan = plan_downloads(
            remote("janesmith.png", "other.jpg"),
            local(),
            expected_names=["Smith, Jane"],
        )

        assert [o.name for o in plan.to_download] == ["janesmith.png"]

    def test_roster_matches_nothing(self) -> None:
        """An empty filtered set should fall back to the whole listing."""
        plan = plan_downloads(
            remote("p_001.jpg", "p_002.jpg"),
            local(),
            expected_names=["Alice"],
        )

        assert [o.name for o in plan.to_download] == ["p_001.jpg", "p_002.jpg"]
        assert plan.fallback is FallbackMode.ALL_REMOTE

    def test_empty_listing_with_roster(self) -> None:
        """An empty listing should plan direct fetches for missing players."""
        plan = plan_downloads(
            [],
            local("alice.jpg"),
            expected_names=["Alice", "Bob", "Carol"],
        )

        assert plan.fallback is FallbackMode.DIRECT_FETCH
        assert plan.direct_names == ["bob", "carol"]
        assert plan.skipped == 1
        assert plan.total == 2

    def test_empty_listing_without_roster(self) -> None:
        """An empty listing without a roster has nothing to do."""
        plan = plan_downloads([], local("alice.jpg"))

        assert plan.total == 0
        assert plan.fallback is FallbackMode.NONE

    def test_roster_duplicates_collapse(self) -> None:
        """The same player listed twice should be fetched once."""
        plan = plan_downloads([], local(), expected_names=["Jane Smith", "Smith, Jane"])
        assert plan.direct_names == ["janesmith"]

    def test_one_download_per_logical_name(self) -> None:
        """Only one extension per player should be downloaded."""
        plan = plan_downloads(remote("bob.png", "bob.jpg"), local())

        assert [o.name for o in plan.to_download] == ["bob.jpg"]

    def test_non_photo_objects_ignored(self) -> None:
        """Objects without a photo extension should never be candidates."""
        plan = plan_downloads(remote("bob", "notes.txt", "alice.png"), local())

        assert [o.name for o in plan.to_download] == ["alice.png"]
        assert plan.skipped == 0

    def test_non_photo_objects_ignored_in_fallback(self) -> None:
        """The naming-mismatch fallback should only consider photos."""
        plan = plan_downloads(
            remote("p_001.jpg", "readme", "index.html"),
            local(),
            expected_names=["Alice"],
        )

        assert plan.fallback is FallbackMode.ALL_REMOTE
        assert [o.name for o in plan.to_download] == ["p_001.jpg"]

    def test_only_non_photo_objects_with_roster(self) -> None:
        """A bucket without photos behaves like an empty listing."""
        plan = plan_downloads(remote("readme"), local(), expected_names=["Alice"])

        assert plan.fallback is FallbackMode.DIRECT_FETCH
        assert plan.direct_names == ["alice"]


class TestDedupe:
    """Tests for dedupe_by_logical_name."""

    def test_jpg_wins(self) -> None:
        """jpg should be preferred over jpeg and png."""
        objects = dedupe_by_logical_name(remote("a.png", "a.jpeg", "a.jpg", "b.png"))

        assert [o.name for o in objects] == ["a.jpg", "b.png"]
