"""Formatting utilities for the Nano Edit UI."""

from collections.abc import Sequence

from .models import SelectedFile


def format_mb(num_bytes: int) -> str:
    """Format a byte count as megabytes with two decimals (``"1.50"``)."""
    return f"{num_bytes / (1024 * 1024):.2f}"


def format_selection_summary(files: Sequence[SelectedFile], max_files: int) -> str:
    """Format the current selection as a Markdown list.

    Args:
        files: Current selection
        max_files: Configured selection cap, shown as ``n/max``

    Returns:
        Markdown text; a placeholder when nothing is selected
    """
    if not files:
        return "*No image selected*"

    total = sum(f.size for f in files)
    lines = [f"**Selected:** {len(files)}/{max_files} images ({format_mb(total)} MB)", ""]
    lines.extend(f"- {f.name} ({format_mb(f.size)} MB)" for f in files)
    return "\n".join(lines)


def format_success(size: int | None) -> str:
    """Format the success message shown after a completed upload."""
    if size is None:
        return "✅ Uploaded successfully."
    return f"✅ Uploaded. Image size: {format_mb(size)} MB."


def format_error(message: str) -> str:
    """Format an error message for display, keeping the message text verbatim."""
    return f"❌ {message}"


def format_warning(message: str) -> str:
    """Format a non-fatal warning for display."""
    return f"⚠️ {message}"
