"""Gradio event handlers for the upload widget.

- selection: picking/dropping files, clearing the selection
- submission: locking the submit button, sending the request, rendering the result
"""

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Any

import gradio as gr

from nanoedit.core.config import config

from .client import UploadClient, UploadError
from .formatting import format_error, format_selection_summary, format_success, format_warning
from .models import RESULT_FILENAME_PREFIX, UIState
from .selection import describe_files, merge_selection, preview_items
from .validation import ValidationError, validate_submission

logger = logging.getLogger(__name__)


def _selection_outputs(state: UIState) -> tuple[list[tuple[str, str]], str]:
    """Regenerate preview handles and the summary for the current selection."""
    return preview_items(state.selection), format_selection_summary(
        state.selection, config.max_files
    )


def handle_files_selected(
    paths: list[str] | None, append: bool, state: UIState
) -> tuple[list[tuple[str, str]], str, str, None, UIState]:
    """Handle files picked from the dialog or dropped on the widget.

    Args:
        paths: Local paths of the picked files (Gradio temp copies)
        append: Add to the current selection instead of replacing it
        state: UI state

    Returns:
        Tuple of (previews, summary, message, file_input_reset, updated_state).
        The file input is reset so the next pick starts empty.
    """
    state = state or UIState()
    message = ""

    try:
        incoming = describe_files(paths or [])
        update = merge_selection(
            state.selection,
            incoming,
            append=append,
            max_files=config.max_files,
            max_total_bytes=config.max_total_bytes,
        )
        state.selection = update.files
        if update.warning:
            message = format_warning(update.warning)

    except ValidationError as e:
        # Rejected batch: previous selection is kept as-is
        logger.warning(f"Selection rejected: {e}")
        message = format_error(str(e))

    except OSError as e:
        logger.error(f"Could not read selected files: {e}", exc_info=True)
        message = format_error(f"Could not read the selected files: {e}")

    previews, summary = _selection_outputs(state)
    return previews, summary, message, None, state


def clear_selection(state: UIState) -> tuple[list[tuple[str, str]], str, str, UIState]:
    """Clear the selection set and its previews.

    Args:
        state: UI state

    Returns:
        Tuple of (previews, summary, message, updated_state)
    """
    state = state or UIState()
    state.selection = ()
    logger.info("Selection cleared")
    previews, summary = _selection_outputs(state)
    return previews, summary, "", state


def lock_submit() -> Any:
    """Disable the submit button while a request is in flight."""
    return gr.update(interactive=False, value="Processing...")


def unlock_submit() -> Any:
    """Re-enable the submit button."""
    return gr.update(interactive=True, value="Submit")


def _save_result(image: bytes, mime_type: str) -> Path:
    """Write a generated image into the outputs directory for display and download."""
    extension = mimetypes.guess_extension(mime_type) or ".png"
    path = config.outputs_dir / f"{RESULT_FILENAME_PREFIX}-{uuid.uuid4().hex}{extension}"
    path.write_bytes(image)
    return path


def _get_upload_client() -> UploadClient:
    return UploadClient(config.upload_url, timeout=config.request_timeout)


def submit_generation(
    prompt: str, state: UIState, client: UploadClient | None = None
) -> tuple[str | None, Any, str, list[tuple[str, str]], str, UIState]:
    """Submit the selection and prompt, then render the result or the error.

    Args:
        prompt: Prompt text as typed
        state: UI state
        client: Upload client (defaults to one for ``config.upload_url``)

    Returns:
        Tuple of (result_image, download_button_update, status, previews,
        summary, updated_state)
    """
    state = state or UIState()
    state.clear_messages()

    try:
        validate_submission(prompt, state.selection)

        # The UI locks the button first; this catches direct calls while a submit runs.
        if state.is_submitting:
            raise ValidationError("A request is already in progress.")

        submitted = state.selection
        state.is_submitting = True
        try:
            result = (client or _get_upload_client()).submit(prompt or "", submitted)
        finally:
            state.is_submitting = False

        state.success = format_success(result.size)
        if result.image:
            state.result_path = str(_save_result(result.image, result.mime_type))
            logger.info(f"Result saved to {state.result_path}")
        # Files picked while the request was in flight stay selected.
        state.selection = tuple(f for f in state.selection if f not in submitted)

    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        state.error = str(e)

    except UploadError as e:
        state.error = str(e)

    except Exception as e:
        logger.error(f"Error submitting generation: {e}", exc_info=True)
        state.error = str(e) or "Unexpected error"

    status = format_error(state.error) if state.error else state.success or ""
    download = gr.update(value=state.result_path, visible=state.result_path is not None)
    previews, summary = _selection_outputs(state)
    return state.result_path, download, status, previews, summary, state
