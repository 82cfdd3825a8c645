"""Shared pytest fixtures for Nano Edit tests."""

import io
import os
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from google.genai import types
from PIL import Image

from nanoedit.core.config import NanoEditConfig
from nanoedit.ui.models import SelectedFile, UIState

# Keep Gradio from phoning home when the app is imported in tests.
os.environ.setdefault("GRADIO_ANALYTICS_ENABLED", "False")


def _png_bytes(color: tuple[int, int, int] = (255, 0, 0), size: int = 8) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (size, size), color=color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> NanoEditConfig:
    """Create a test configuration with a temporary outputs directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        NanoEditConfig instance for testing
    """
    return NanoEditConfig(
        _env_file=None,
        gemini_api_key="test-key",
        gemini_model="test-image-model",
        outputs_dir=str(temp_dir / "outputs"),
        max_files=3,
        max_total_bytes=1024 * 1024,
        api_base_url="http://testserver",
    )


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes of a small red PNG image."""
    return _png_bytes()


@pytest.fixture
def generated_png() -> bytes:
    """Bytes of the PNG the fake model "generates"."""
    return _png_bytes(color=(0, 0, 255), size=16)


@pytest.fixture
def make_image_file(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing a small PNG to the temporary directory.

    Returns:
        Callable ``(name, color=(255, 0, 0)) -> Path``
    """

    def _make(name: str, color: tuple[int, int, int] = (255, 0, 0)) -> Path:
        path = temp_dir / name
        path.write_bytes(_png_bytes(color=color))
        return path

    return _make


@pytest.fixture
def make_selected_file() -> Callable[..., SelectedFile]:
    """Factory for in-memory SelectedFile entries (no file on disk).

    Returns:
        Callable ``(name, size=100, last_modified=1.0, mime_type="image/png",
        digest=None)``; the digest defaults to one derived from *name*
    """

    def _make(
        name: str,
        size: int = 100,
        last_modified: float = 1.0,
        mime_type: str = "image/png",
        digest: str | None = None,
    ) -> SelectedFile:
        return SelectedFile(
            name=name,
            size=size,
            last_modified=last_modified,
            mime_type=mime_type,
            path=Path("/nonexistent") / name,
            digest=digest if digest is not None else f"sha-{name}",
        )

    return _make


@pytest.fixture
def build_response() -> Callable[..., types.GenerateContentResponse]:
    """Factory for ``GenerateContentResponse`` objects.

    Returns:
        Callable accepting ``image``, ``mime_type``, ``text``,
        ``finish_reason``, ``finish_message``, ``safety_ratings``,
        ``block_reason``, ``block_reason_message`` and ``with_candidate``.
    """

    def _build(
        *,
        image: bytes | None = None,
        mime_type: str | None = "image/png",
        text: str | None = None,
        finish_reason: types.FinishReason | None = None,
        finish_message: str | None = None,
        safety_ratings: list[types.SafetyRating] | None = None,
        block_reason: types.BlockedReason | None = None,
        block_reason_message: str | None = None,
        with_candidate: bool = True,
    ) -> types.GenerateContentResponse:
        parts: list[types.Part] = []
        if text is not None:
            parts.append(types.Part(text=text))
        if image is not None:
            parts.append(types.Part(inline_data=types.Blob(data=image, mime_type=mime_type)))

        candidates = None
        if with_candidate:
            candidates = [
                types.Candidate(
                    content=types.Content(role="model", parts=parts),
                    finish_reason=finish_reason,
                    finish_message=finish_message,
                    safety_ratings=safety_ratings,
                )
            ]

        prompt_feedback = None
        if block_reason is not None:
            prompt_feedback = types.GenerateContentResponsePromptFeedback(
                block_reason=block_reason,
                block_reason_message=block_reason_message,
            )

        return types.GenerateContentResponse(
            candidates=candidates,
            prompt_feedback=prompt_feedback,
        )

    return _build


@pytest.fixture
def fake_genai(build_response, generated_png) -> MagicMock:
    """Mock ``genai.Client`` whose model returns *generated_png*.

    Tests override ``fake_genai.models.generate_content`` to simulate
    rejections and failures.
    """
    client = MagicMock()
    client.models.generate_content.return_value = build_response(
        image=generated_png,
        finish_reason=types.FinishReason.STOP,
    )
    return client


@pytest.fixture
def test_client(test_config: NanoEditConfig, fake_genai: MagicMock):
    """FastAPI TestClient with the Gemini SDK replaced by *fake_genai*.

    Yields:
        TestClient bound to the application, with ``config`` patched to
        *test_config*
    """
    from fastapi.testclient import TestClient

    from nanoedit.api.main import app
    from nanoedit.core.gemini_client import GeminiImageClient

    with patch("nanoedit.api.main.config", test_config):
        with TestClient(app) as client:
            app.state.image_client = GeminiImageClient(
                api_key="test-key", model=test_config.gemini_model, client=fake_genai
            )
            yield client


@pytest.fixture
def ui_state() -> UIState:
    """Create empty UI state for testing.

    Returns:
        UIState instance
    """
    return UIState()
