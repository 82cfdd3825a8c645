"""Validation utilities for Nano Edit UI inputs."""

import logging
from collections.abc import Sequence

from .formatting import format_mb
from .models import SelectedFile

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


class SelectionError(ValidationError):
    """A new selection was rejected; the previous selection stays in place."""

    pass


def validate_submission(prompt: str | None, selection: Sequence[SelectedFile]) -> None:
    """Ensure a submission has something to send.

    Args:
        prompt: Prompt text as typed
        selection: Current selection set

    Raises:
        ValidationError: If the prompt is blank and no file is selected
    """
    if not selection and (not prompt or not prompt.strip()):
        raise ValidationError("Enter a prompt or upload an image.")


def validate_total_size(files: Sequence[SelectedFile], max_total_bytes: int) -> None:
    """Ensure a selection fits the byte budget.

    Args:
        files: Candidate selection
        max_total_bytes: Budget in bytes

    Raises:
        SelectionError: If the combined size exceeds the budget
    """
    total = sum(f.size for f in files)
    if total > max_total_bytes:
        logger.warning(f"Selection rejected: {total} bytes exceeds budget of {max_total_bytes}")
        raise SelectionError(
            f"Selected images total {format_mb(total)} MB, "
            f"exceeding the {format_mb(max_total_bytes)} MB limit."
        )
