"""Data models for Nano Edit UI state."""

import hashlib
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

FALLBACK_MIME_TYPE = "application/octet-stream"


def detect_mime_type(path: Path) -> str:
    """Detect the MIME type of a file.

    The file extension is tried first.  When it is unknown, the file header
    is sniffed with Pillow so extension-less images are still recognised.

    Args:
        path: File to inspect

    Returns:
        MIME type, or ``application/octet-stream`` if undetectable
    """
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed:
        return guessed

    try:
        with Image.open(path) as img:
            return Image.MIME.get(img.format or "", FALLBACK_MIME_TYPE)
    except (UnidentifiedImageError, OSError):
        return FALLBACK_MIME_TYPE


@dataclass(frozen=True)
class SelectedFile:
    """One file in the selection set.

    Identity is the composite key ``(name, size, digest)``.  The upload temp
    copy gets a fresh mtime on every pick, so ``last_modified`` does not take
    part in it and the SHA-256 of the content identifies the file.
    """

    name: str
    size: int
    last_modified: float
    mime_type: str
    path: Path
    digest: str = ""

    @property
    def key(self) -> tuple[str, int, str]:
        """Composite identity key used for deduplication."""
        return (self.name, self.size, self.digest)

    @property
    def is_image(self) -> bool:
        """Check if the file is image-typed."""
        return self.mime_type.startswith("image/")

    @classmethod
    def from_path(cls, path: str | Path, name: str | None = None) -> "SelectedFile":
        """Describe a file on disk.

        Args:
            path: Local path of the file
            name: Display name (defaults to the path's file name)

        Returns:
            SelectedFile with size and modification time from ``stat()`` and
            the content digest
        """
        path = Path(path)
        stat = path.stat()
        return cls(
            name=name or path.name,
            size=stat.st_size,
            last_modified=stat.st_mtime,
            mime_type=detect_mime_type(path),
            path=path,
            digest=hashlib.sha256(path.read_bytes()).hexdigest(),
        )


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each user gets their own UIState instance through ``gr.State``.

    Attributes
    ----------
    selection : tuple[SelectedFile, ...]
        Current selection set, in selection order
    is_submitting : bool
        Busy flag; at most one request in flight per session
    result_path : str | None
        Local file holding the latest generated image
    error : str | None
        Latest submission error, shown verbatim
    success : str | None
        Latest success message
    """

    selection: tuple[SelectedFile, ...] = ()
    is_submitting: bool = False
    result_path: str | None = None
    error: str | None = None
    success: str | None = None

    @property
    def total_bytes(self) -> int:
        """Combined size of the current selection."""
        return sum(f.size for f in self.selection)

    def clear_messages(self) -> None:
        """Reset the error and success messages before a new submission."""
        self.error = None
        self.success = None

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"UIState(files={len(self.selection)}, "
            f"bytes={self.total_bytes}, "
            f"submitting={self.is_submitting})"
        )


# UI Constants
PROMPT_PLACEHOLDER = (
    "E.g., generate a watercolor landscape at sunset; "
    "or place this image as a repeating t-shirt pattern"
)
RESULT_FILENAME_PREFIX = "result"
