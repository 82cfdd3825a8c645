"""Nano Edit — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic response models,
and the prompt resolution logic.

Modules
-------
main
    FastAPI application with the upload route, the mounted Gradio page and
    the ``main()`` CLI entry point.
models
    Pydantic models for the upload route's JSON responses.
prompt_builder
    Effective prompt resolution (user prompt or default merge prompt).
"""
