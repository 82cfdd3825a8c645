"""Nano Edit — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the upload route, the mounted Gradio page and
the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is stateless:

- **Configuration** comes from :data:`nanoedit.core.config.config`
  (environment variables and ``.env``).
- **Image generation** is delegated to
  :class:`~nanoedit.core.gemini_client.GeminiImageClient`, created lazily on
  the first request and kept on ``app.state``.
- **Errors** are raised as :class:`~nanoedit.core.errors.NanoEditError`
  subclasses and rendered as ``{"error": message}`` by one exception handler.
- **The page** is the Gradio upload widget from :mod:`nanoedit.ui.app`,
  mounted under ``config.ui_path``.  It talks to this application only
  through ``POST /api/upload``.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/``                         Redirect to the upload page
POST      ``/api/upload``               Generate an image from prompt + images
GET       ``/ui``                       Gradio upload page (mounted app)
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    nanoedit

Direct invocation::

    python -m nanoedit.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.datastructures import FormData, UploadFile

from nanoedit import __version__
from nanoedit.api.models import ErrorResponse, UploadResponse
from nanoedit.api.prompt_builder import resolve_prompt
from nanoedit.core.config import config
from nanoedit.core.errors import NanoEditError, PayloadTooLargeError
from nanoedit.core.gemini_client import DEFAULT_MIME_TYPE, GeminiImageClient, ImagePayload
from nanoedit.ui.app import create_ui
from nanoedit.ui.formatting import format_mb

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    No Gemini client is built at startup so the server can start (and report
    a clear error per request) without an API key.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.image_client = None
    logger.info(f"Nano Edit {__version__} started (model: {config.gemini_model}).")

    yield

    app.state.image_client = None
    logger.info("Nano Edit stopped.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Nano Edit",
    description="Upload images, describe an edit, and get a generated image back.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so the widget can be served from a different
# port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NanoEditError)
async def nanoedit_error_handler(request: Request, exc: NanoEditError) -> JSONResponse:
    """Render a :class:`NanoEditError` as the widget's ``{"error"}`` contract."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


# ---------------------------------------------------------------------------
# Request helpers.
# ---------------------------------------------------------------------------


def _get_image_client(app: FastAPI) -> GeminiImageClient:
    """Return the shared Gemini client, creating it on first use.

    Raises:
        ConfigurationError: No API key is configured.
    """
    client = getattr(app.state, "image_client", None)
    if client is None:
        client = GeminiImageClient.from_config(config)
        app.state.image_client = client
    return client


def _collect_upload_files(form: FormData) -> list[UploadFile]:
    """Return the uploaded files from ``files`` parts, else the ``file`` part.

    Parts that are plain strings (not files) are ignored.
    """
    files = [part for part in form.getlist("files") if isinstance(part, UploadFile)]
    if not files:
        single = form.get("file")
        if isinstance(single, UploadFile):
            files.append(single)
    return files


def _check_budget(total_bytes: int) -> None:
    """Raise :class:`PayloadTooLargeError` if *total_bytes* exceeds the budget."""
    if total_bytes > config.max_total_bytes:
        raise PayloadTooLargeError(
            f"Selected images total {format_mb(total_bytes)} MB, "
            f"exceeding the {format_mb(config.max_total_bytes)} MB limit."
        )


async def _read_images(files: list[UploadFile]) -> tuple[list[ImagePayload], int]:
    """Read every upload into an :class:`ImagePayload`.

    Returns:
        Tuple of ``(payloads, total_bytes)``.
    """
    payloads: list[ImagePayload] = []
    total_bytes = 0
    for upload in files:
        data = await upload.read()
        total_bytes += len(data)
        payloads.append(
            ImagePayload(data=data, mime_type=upload.content_type or DEFAULT_MIME_TYPE)
        )
    return payloads, total_bytes


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    """Redirect to the mounted upload page."""
    return RedirectResponse(url=config.ui_path)


@app.post(
    "/api/upload",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def upload(request: Request) -> UploadResponse:
    """Generate an image from the uploaded images and prompt.

    This endpoint:

    1. Reads the ``files`` parts (or a single ``file`` part) and ``prompt``.
    2. Resolves the effective prompt (default merge prompt for 2+ images
       without instructions).
    3. Enforces the byte budget, first on the part sizes the parser
       recorded and again on the bytes read.
    4. Calls the Gemini model once, in the threadpool.
    5. Returns the generated image as base64.

    Args:
        request: The incoming multipart request.

    Returns:
        :class:`UploadResponse` with ``ok``, ``size``, ``imageBase64`` and
        ``mimeType``.

    Raises:
        NanoEditError: Rendered as ``{"error": ...}`` with the error's
            status code.  Unexpected failures become a 500 ``Server error``.
    """
    try:
        async with request.form() as form:
            files = _collect_upload_files(form)
            # Part sizes from the parser, checked before any upload is read into memory.
            _check_budget(sum(upload.size or 0 for upload in files))
            images, total_bytes = await _read_images(files)
            prompt = resolve_prompt(form.get("prompt"), len(images))

        logger.info(f"Prompt: {prompt or '<none>'}")
        logger.info(f"Num images: {len(images)}")
        logger.info(f"Total image bytes: {total_bytes}")

        _check_budget(total_bytes)

        client = _get_image_client(request.app)
        result = await run_in_threadpool(client.generate, prompt, images)

    except NanoEditError:
        raise
    except Exception as e:
        logger.error(f"Upload error: {e}", exc_info=True)
        raise NanoEditError() from e

    return UploadResponse(
        size=total_bytes or None,
        image_base64=result.to_base64(),
        mime_type=result.mime_type,
    )


# Mount the Gradio upload page.  Must come after the API routes so they take
# precedence.
app = gr.mount_gradio_app(app, create_ui(), path=config.ui_path)


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~nanoedit.core.config.config` (which
    loads from ``NANOEDIT_SERVER_HOST`` and ``NANOEDIT_SERVER_PORT``
    environment variables).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``nanoedit`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not config.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; generation requests will fail.")

    uvicorn.run(
        "nanoedit.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
