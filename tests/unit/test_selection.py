"""Unit tests for selection set management."""

import os
from pathlib import Path

import pytest

from nanoedit.ui.models import SelectedFile
from nanoedit.ui.selection import (
    deduplicate,
    describe_files,
    merge_selection,
    preview_items,
)
from nanoedit.ui.validation import SelectionError

LIMITS = {"max_files": 3, "max_total_bytes": 1000}


class TestDescribeFiles:
    """Tests for describe_files."""

    def test_describes_png(self, make_image_file):
        """A PNG on disk is described with its real size and type."""
        path = make_image_file("red.png")
        (entry,) = describe_files([str(path)])

        assert entry.name == "red.png"
        assert entry.size == path.stat().st_size
        assert entry.mime_type == "image/png"
        assert entry.path == path
        assert entry.is_image

    def test_skips_blank_entries(self, make_image_file):
        """Empty strings and None from the widget are ignored."""
        path = make_image_file("a.png")
        assert len(describe_files(["", None, str(path)])) == 1

    def test_extensionless_image_sniffed(self, temp_dir, png_bytes):
        """An image without a file extension is still recognised."""
        path = temp_dir / "upload"
        path.write_bytes(png_bytes)
        (entry,) = describe_files([path])
        assert entry.mime_type == "image/png"

    def test_text_file_not_image(self, temp_dir):
        """A text file is described but not image-typed."""
        path = temp_dir / "notes.txt"
        path.write_text("hello")
        (entry,) = describe_files([path])
        assert not entry.is_image

    def test_unknown_bytes_fallback(self, temp_dir):
        """Unrecognisable content falls back to application/octet-stream."""
        path = temp_dir / "blob"
        path.write_bytes(b"\x00\x01\x02")
        (entry,) = describe_files([path])
        assert entry.mime_type == "application/octet-stream"

    def test_missing_file_raises(self, temp_dir):
        """A vanished temp file surfaces as OSError."""
        with pytest.raises(OSError):
            describe_files([temp_dir / "gone.png"])


class TestDeduplicate:
    """Tests for deduplicate."""

    def test_first_occurrence_wins(self, make_selected_file):
        """Same (name, size, digest) collapses to the first entry."""
        a = make_selected_file("a.png")
        a_again = SelectedFile(
            name="a.png",
            size=a.size,
            last_modified=99.0,
            mime_type="image/png",
            path=Path("/elsewhere/a.png"),
            digest=a.digest,
        )
        b = make_selected_file("b.png")

        result = deduplicate([a, b, a_again])

        assert result == [a, b]
        assert result[0].path == a.path

    def test_different_content_is_distinct(self, make_selected_file):
        """Same name and size with different content are kept apart."""
        a1 = make_selected_file("a.png", digest="one")
        a2 = make_selected_file("a.png", digest="two")
        assert len(deduplicate([a1, a2])) == 2

    def test_repick_of_same_upload_collapses(self, temp_dir, png_bytes):
        """Re-picking a file rewrites its temp copy with a new mtime but stays one entry."""
        upload = temp_dir / "abc123" / "cat.png"
        upload.parent.mkdir()
        upload.write_bytes(png_bytes)
        first = describe_files([upload])
        upload.write_bytes(png_bytes)
        later = first[0].last_modified + 5
        os.utime(upload, (later, later))
        second = describe_files([upload])

        assert first[0].last_modified != second[0].last_modified
        update = merge_selection(tuple(first), second, append=True, **LIMITS)

        assert len(update.files) == 1
        assert update.files[0] == first[0]


class TestMergeSelection:
    """Tests for merge_selection."""

    def test_replace_mode(self, make_selected_file):
        """Without append, the new batch replaces the selection."""
        current = (make_selected_file("old.png"),)
        incoming = [make_selected_file("new.png")]

        update = merge_selection(current, incoming, append=False, **LIMITS)

        assert [f.name for f in update.files] == ["new.png"]
        assert update.warning is None

    def test_append_mode_keeps_order(self, make_selected_file):
        """Appending keeps existing entries first, in selection order."""
        current = (make_selected_file("a.png"),)
        incoming = [make_selected_file("b.png"), make_selected_file("c.png")]

        update = merge_selection(current, incoming, append=True, **LIMITS)

        assert [f.name for f in update.files] == ["a.png", "b.png", "c.png"]

    def test_append_duplicate_ignored(self, make_selected_file):
        """Re-picking an already selected file does not duplicate it."""
        a = make_selected_file("a.png")
        update = merge_selection((a,), [a], append=True, **LIMITS)
        assert update.files == (a,)

    def test_truncates_to_max_files(self, make_selected_file):
        """More than max_files images keeps the first ones and warns."""
        incoming = [make_selected_file(f"{i}.png", size=10) for i in range(5)]

        update = merge_selection((), incoming, append=False, **LIMITS)

        assert [f.name for f in update.files] == ["0.png", "1.png", "2.png"]
        assert "first 3 images" in update.warning

    def test_truncation_counts_existing(self, make_selected_file):
        """Truncation applies to the merged set, not just the new batch."""
        current = tuple(make_selected_file(f"old{i}.png", size=10) for i in range(2))
        incoming = [make_selected_file(f"new{i}.png", size=10) for i in range(2)]

        update = merge_selection(current, incoming, append=True, **LIMITS)

        assert [f.name for f in update.files] == ["old0.png", "old1.png", "new0.png"]

    def test_non_images_skipped_with_warning(self, make_selected_file):
        """Non-image files in a mixed batch are dropped with a notice."""
        incoming = [
            make_selected_file("a.png"),
            make_selected_file("notes.txt", mime_type="text/plain"),
        ]

        update = merge_selection((), incoming, append=False, **LIMITS)

        assert [f.name for f in update.files] == ["a.png"]
        assert update.warning == "Skipped 1 non-image file(s)."

    def test_all_non_images_rejected(self, make_selected_file):
        """A batch with no image at all is rejected."""
        incoming = [make_selected_file("doc.pdf", mime_type="application/pdf")]

        with pytest.raises(SelectionError, match="valid image"):
            merge_selection((), incoming, append=True, **LIMITS)

    def test_over_budget_rejected(self, make_selected_file):
        """A merged selection over the byte budget is rejected entirely."""
        current = (make_selected_file("a.png", size=600),)
        incoming = [make_selected_file("b.png", size=600)]

        with pytest.raises(SelectionError, match="exceeding"):
            merge_selection(current, incoming, append=True, **LIMITS)

    def test_budget_checked_after_truncation(self, make_selected_file):
        """Files dropped by truncation do not count against the budget."""
        incoming = [make_selected_file(f"{i}.png", size=300) for i in range(4)]

        update = merge_selection((), incoming, append=False, **LIMITS)

        assert len(update.files) == 3
        assert sum(f.size for f in update.files) == 900

    def test_exact_budget_accepted(self, make_selected_file):
        """A selection exactly at the budget is allowed."""
        incoming = [make_selected_file("a.png", size=1000)]
        update = merge_selection((), incoming, append=False, **LIMITS)
        assert len(update.files) == 1

    def test_empty_batch_replace_clears(self, make_selected_file):
        """An empty batch in replace mode yields an empty selection."""
        current = (make_selected_file("a.png"),)
        update = merge_selection(current, [], append=False, **LIMITS)
        assert update.files == ()

    def test_current_not_mutated_on_rejection(self, make_selected_file):
        """The caller's selection is untouched when a batch is rejected."""
        current = [make_selected_file("a.png", size=900)]
        snapshot = list(current)

        with pytest.raises(SelectionError):
            merge_selection(
                current, [make_selected_file("b.png", size=900)], append=True, **LIMITS
            )

        assert current == snapshot


class TestPreviewItems:
    """Tests for preview_items."""

    def test_one_handle_per_file(self, make_selected_file):
        """Each file yields a (path, caption) pair in selection order."""
        files = [make_selected_file("a.png"), make_selected_file("b.png")]

        items = preview_items(files)

        assert items == [
            (str(Path("/nonexistent/a.png")), "a.png"),
            (str(Path("/nonexistent/b.png")), "b.png"),
        ]

    def test_empty(self):
        """No files, no previews."""
        assert preview_items(()) == []
