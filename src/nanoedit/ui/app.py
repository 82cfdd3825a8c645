"""Gradio upload widget for Nano Edit.

The page is mounted into the FastAPI application by :mod:`nanoedit.api.main`
and talks to it only through ``POST /api/upload``.
"""

import logging

import gradio as gr

from nanoedit.core.config import config

from .formatting import format_selection_summary
from .handlers import (
    clear_selection,
    handle_files_selected,
    lock_submit,
    submit_generation,
    unlock_submit,
)
from .models import PROMPT_PLACEHOLDER, UIState

logger = logging.getLogger(__name__)


def create_ui() -> gr.Blocks:
    """Create the upload page.

    Returns:
        Gradio Blocks app (not launched)
    """
    app = gr.Blocks(title="Nano Edit")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown(
            """
            # Image Editor
            ### Upload images and describe the edit you want
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                # Click-to-choose and drag-and-drop both land here
                file_input = gr.File(
                    label=f"Drag and drop images, or click to choose (up to {config.max_files})",
                    file_count="multiple",
                    file_types=["image"],
                    type="filepath",
                )
                append_checkbox = gr.Checkbox(
                    label="Add to current selection",
                    value=True,
                    info="Unchecked: a new pick replaces the current selection",
                )
                selection_message = gr.Markdown(value="")
                preview_gallery = gr.Gallery(
                    label="Preview",
                    columns=3,
                    height=320,
                    object_fit="contain",
                )
                selection_summary = gr.Markdown(
                    value=format_selection_summary((), config.max_files)
                )

            with gr.Column(scale=1):
                prompt_input = gr.Textbox(
                    label="Prompt (describe what to generate or edit)",
                    placeholder=PROMPT_PLACEHOLDER,
                    lines=6,
                )
                with gr.Row():
                    submit_btn = gr.Button("Submit", variant="primary")
                    clear_btn = gr.Button("Clear images")
                status_output = gr.Markdown(value="")

        gr.Markdown("### Result")
        result_image = gr.Image(
            label="Generated result",
            type="filepath",
            interactive=False,
            height=512,
        )
        download_btn = gr.DownloadButton("Download", visible=False)

        # Event handlers

        file_input.upload(
            fn=handle_files_selected,
            inputs=[file_input, append_checkbox, ui_state],
            outputs=[
                preview_gallery,
                selection_summary,
                selection_message,
                file_input,
                ui_state,
            ],
        )

        clear_btn.click(
            fn=clear_selection,
            inputs=[ui_state],
            outputs=[preview_gallery, selection_summary, selection_message, ui_state],
        )

        # One request in flight: button locked, event queue limited to one
        submit_btn.click(
            fn=lock_submit,
            outputs=[submit_btn],
        ).then(
            fn=submit_generation,
            inputs=[prompt_input, ui_state],
            outputs=[
                result_image,
                download_btn,
                status_output,
                preview_gallery,
                selection_summary,
                ui_state,
            ],
            concurrency_limit=1,
        ).then(
            fn=unlock_submit,
            outputs=[submit_btn],
        )

    logger.info("Upload UI created")
    return app
