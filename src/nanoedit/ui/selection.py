"""Selection set management for the upload widget.

Turns files picked (or dropped) in the widget into the selection set that
is submitted.  A new batch goes through these steps, in order:

1. Describe each path as a :class:`SelectedFile`.
2. Keep only image-typed entries.  A batch with no images at all is rejected.
3. Merge with the current selection (append mode) or replace it.
4. Drop duplicates by ``(name, size, digest)``, first one wins.
5. Truncate to ``max_files`` and report a warning.
6. Reject the whole batch if the total exceeds ``max_total_bytes``.

A rejection raises :class:`SelectionError` before anything is returned, so
the caller's current selection is never partially updated.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .models import SelectedFile
from .validation import SelectionError, validate_total_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionUpdate:
    """Outcome of a successful selection change.

    Attributes:
        files: The new selection set
        warning: Non-fatal notice (truncation, skipped files), or ``None``
    """

    files: tuple[SelectedFile, ...]
    warning: str | None = None


def describe_files(paths: Iterable[str | Path]) -> list[SelectedFile]:
    """Describe picked paths as :class:`SelectedFile` entries, skipping blanks."""
    return [SelectedFile.from_path(p) for p in paths if p]


def deduplicate(files: Iterable[SelectedFile]) -> list[SelectedFile]:
    """Remove duplicate entries by identity key, keeping the first occurrence."""
    seen: set[tuple[str, int, str]] = set()
    unique: list[SelectedFile] = []
    for f in files:
        if f.key in seen:
            continue
        seen.add(f.key)
        unique.append(f)
    return unique


def merge_selection(
    current: Sequence[SelectedFile],
    incoming: Sequence[SelectedFile],
    *,
    append: bool,
    max_files: int,
    max_total_bytes: int,
) -> SelectionUpdate:
    """Apply a newly picked batch of files to the current selection.

    Args:
        current: Current selection set
        incoming: Newly picked files (any type)
        append: Merge with *current* instead of replacing it
        max_files: Maximum number of files kept
        max_total_bytes: Maximum combined size in bytes

    Returns:
        SelectionUpdate with the new selection and an optional warning

    Raises:
        SelectionError: If the batch has no images or the result is over budget
    """
    images = [f for f in incoming if f.is_image]
    skipped = len(incoming) - len(images)

    if incoming and not images:
        raise SelectionError("Please select a valid image file.")

    combined = list(current) + images if append else images
    unique = deduplicate(combined)

    warnings: list[str] = []
    if skipped:
        warnings.append(f"Skipped {skipped} non-image file(s).")

    if len(unique) > max_files:
        logger.info(f"Selection truncated from {len(unique)} to {max_files} files")
        unique = unique[:max_files]
        warnings.append(f"Only the first {max_files} images were kept (maximum {max_files}).")

    validate_total_size(unique, max_total_bytes)

    logger.info(f"Selection updated: {len(unique)} file(s)")
    return SelectionUpdate(files=tuple(unique), warning=" ".join(warnings) or None)


def preview_items(files: Sequence[SelectedFile]) -> list[tuple[str, str]]:
    """Build gallery preview handles ``(path, caption)`` for the selection."""
    return [(str(f.path), f.name) for f in files]
