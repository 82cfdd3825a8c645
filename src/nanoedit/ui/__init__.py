"""Gradio upload widget for Nano Edit.

Modules
-------
app
    Page layout and event wiring (``create_ui``).
handlers
    Event handlers for selection and submission.
selection
    Selection set rules: image filter, merge, deduplication, caps.
client
    ``httpx`` client for ``POST /api/upload``.
models
    ``SelectedFile`` and per-session ``UIState``.
validation
    User-facing validation errors.
formatting
    Markdown messages shown in the page.
"""
