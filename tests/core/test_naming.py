"""Tests for photo naming rules."""

from __future__ import annotations

from tourneyphotos.core.naming import (
    content_type_for,
    expected_file_names,
    extension_rank,
    is_photo_name,
    logical_name,
    logical_name_of,
    normalize_basename,
    photo_file_name,
)


class TestLogicalName:
    """Tests for logical_name."""

    def test_last_first_is_swapped(self) -> None:
        """'Last, First' should become 'firstlast'."""
        assert logical_name("Smith, Jane") == "janesmith"

    def test_plain_name(self) -> None:
        """A name without comma should keep its order."""
        assert logical_name("Jane Smith") == "janesmith"

    def test_whitespace_removed(self) -> None:
        """All whitespace should be removed, including inner spaces."""
        assert logical_name("  Van Der Berg ,  Anna  Maria ") == "annamariavanderberg"

    def test_already_logical(self) -> None:
        """A logical name should map to itself."""
        assert logical_name("janesmith") == "janesmith"

    def test_empty(self) -> None:
        """An empty name should give an empty logical name."""
        assert logical_name("") == ""


class TestFileNames:
    """Tests for file name helpers."""

    def test_photo_file_name_defaults_to_jpg(self) -> None:
        """Captured photos use the jpg extension."""
        assert photo_file_name("Smith, Jane") == "janesmith.jpg"
        assert photo_file_name("Smith, Jane", ".png") == "janesmith.png"

    def test_normalize_basename_strips_prefix(self) -> None:
        """Path prefixes should be removed and case folded."""
        assert normalize_basename("players/2025/JaneSmith.PNG") == "janesmith.png"
        assert normalize_basename("C:\\photos\\Bob.jpg") == "bob.jpg"

    def test_logical_name_of(self) -> None:
        """The logical name of a file is its lowercase stem."""
        assert logical_name_of("players/JaneSmith.PNG") == "janesmith"

    def test_is_photo_name(self) -> None:
        """Only image extensions count as photos."""
        assert is_photo_name("a.jpg")
        assert is_photo_name("a.JPEG")
        assert is_photo_name("a.png")
        assert not is_photo_name(".pending.db")
        assert not is_photo_name("a.jpg.tmp")

    def test_extension_precedence(self) -> None:
        """jpg should win over jpeg, and jpeg over png."""
        assert extension_rank("a.jpg") < extension_rank("a.jpeg") < extension_rank("a.png")
        assert extension_rank("a.gif") > extension_rank("a.png")

    def test_content_type(self) -> None:
        """Upload content type should follow the extension."""
        assert content_type_for("a.png") == "image/png"
        assert content_type_for("a.jpg") == "image/jpeg"

    def test_expected_file_names(self) -> None:
        """Every accepted extension should be expected for each name."""
        assert expected_file_names(["janesmith", ""]) == {
            "janesmith.jpg",
            "janesmith.jpeg",
            "janesmith.png",
        }
