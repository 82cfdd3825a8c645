"""Gemini image generation client for Nano Edit.

This module wraps the ``google-genai`` SDK behind :class:`GeminiImageClient`,
the single point of contact with the external generation API.  The model is
treated as opaque: the inputs are a prompt and zero or more images, the
output is one image (bytes + MIME type) or a structured rejection.

Key Responsibilities
--------------------
- **Request shaping** - the prompt becomes a text part, every image an
  inline-data part (the SDK base64-encodes the bytes on the wire).
- **Failure mapping** - SDK/transport failures become :class:`UpstreamError`
  carrying the SDK status code when it is a usable HTTP code.
- **Response inspection** - prompt-level blocks, policy-terminated
  candidates and image-less answers become :class:`ContentPolicyError` or
  :class:`EmptyResultError` with a descriptive message.

Usage
-----
::

    from nanoedit.core.config import config
    from nanoedit.core.gemini_client import GeminiImageClient, ImagePayload

    client = GeminiImageClient.from_config(config)
    result = client.generate(
        "make it a watercolour",
        [ImagePayload(data=png_bytes, mime_type="image/png")],
    )
    result.to_base64()
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import errors, types

from nanoedit.core.config import NanoEditConfig
from nanoedit.core.errors import (
    ConfigurationError,
    ContentPolicyError,
    EmptyResultError,
    MissingInputError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"

# Finish reasons that mean the candidate was stopped rather than completed.
BLOCKING_FINISH_REASONS = frozenset(
    {
        "SAFETY",
        "BLOCKLIST",
        "PROHIBITED",
        "PROHIBITED_CONTENT",
        "IMAGE_SAFETY",
        "RECITATION",
        "OTHER",
        "ERROR",
    }
)


@dataclass(frozen=True)
class ImagePayload:
    """One input image as sent to the model."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class GeneratedImage:
    """The image returned by the model."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    def to_base64(self) -> str:
        """Return the image bytes as an ASCII base64 string."""
        return base64.b64encode(self.data).decode("ascii")


def _reason_name(value: Any) -> str:
    """Render an SDK enum (or plain string) as its bare upper-case name."""
    name = getattr(value, "name", None)
    return str(name if name is not None else value)


def _safety_details(candidate: Any) -> str:
    """Return ``" Details: <json>"`` for a candidate's safety ratings, or ``""``."""
    ratings = getattr(candidate, "safety_ratings", None)
    if not ratings:
        return ""
    serialisable = [
        r.model_dump(mode="json", by_alias=True, exclude_none=True)
        if hasattr(r, "model_dump")
        else r
        for r in ratings
    ]
    return f" Details: {json.dumps(serialisable, default=str)}"


def extract_image(response: Any) -> GeneratedImage:
    """Pull the generated image out of a ``generate_content`` response.

    Checks, in order:

    1. Prompt feedback with a block reason -> :class:`ContentPolicyError`.
    2. First candidate finished for a policy/termination reason ->
       :class:`ContentPolicyError` (with safety ratings when present).
    3. No inline-data part with bytes -> :class:`EmptyResultError` whose
       message joins every reason field that is present.

    Args:
        response: ``GenerateContentResponse`` (or any object of that shape).

    Returns:
        The first inline image of the first candidate.

    Raises:
        ContentPolicyError: The request or the generation was blocked.
        EmptyResultError: The model answered without an image.
    """
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    if block_reason:
        reason = _reason_name(block_reason)
        block_message = getattr(feedback, "block_reason_message", None)
        message = f"Request blocked: {reason}"
        if block_message:
            message += f" - {block_message}"
        logger.warning(message)
        raise ContentPolicyError(message)

    candidates = getattr(response, "candidates", None) or []
    candidate = candidates[0] if candidates else None

    finish_reason = getattr(candidate, "finish_reason", None)
    finish_name = _reason_name(finish_reason).upper() if finish_reason else None
    if finish_name in BLOCKING_FINISH_REASONS:
        message = f"Generation blocked by policy ({finish_name}).{_safety_details(candidate)}"
        logger.warning(message)
        raise ContentPolicyError(message)

    content = getattr(candidate, "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return GeneratedImage(
                data=inline.data,
                mime_type=getattr(inline, "mime_type", None) or DEFAULT_MIME_TYPE,
            )

    reasons: list[str] = []
    if finish_name:
        reasons.append(f"Finish reason: {finish_name}")
    finish_message = getattr(candidate, "finish_message", None)
    if finish_message:
        reasons.append(f"Message: {finish_message}")
    model_text = next((p.text for p in parts if getattr(p, "text", None)), None)
    if model_text:
        reasons.append(f"Model message: {model_text}")
    details = _safety_details(candidate)
    if details:
        reasons.append(details.strip())

    message = " | ".join(reasons) if reasons else EmptyResultError.default_message
    logger.warning(f"No image in model response: {message}")
    raise EmptyResultError(message)


class GeminiImageClient:
    """Thin wrapper around ``genai.Client`` for one image model.

    Attributes:
        model: Gemini model ID used for every call.
    """

    def __init__(self, api_key: str, model: str, client: Any | None = None) -> None:
        """Create the wrapper.

        Args:
            api_key: Gemini API key.
            model: Gemini model ID.
            client: Pre-built SDK client; one is created from *api_key*
                when omitted.
        """
        self.model = model
        self._client = client if client is not None else genai.Client(api_key=api_key)

    @classmethod
    def from_config(cls, config: NanoEditConfig) -> GeminiImageClient:
        """Build a client from application configuration.

        Raises:
            ConfigurationError: No API key is configured.
        """
        if not config.gemini_api_key:
            raise ConfigurationError()
        return cls(api_key=config.gemini_api_key, model=config.gemini_model)

    @staticmethod
    def build_contents(prompt: str, images: Sequence[ImagePayload]) -> list[types.Part]:
        """Build the request parts: the prompt text first, then each image."""
        parts: list[types.Part] = []
        if prompt:
            parts.append(types.Part.from_text(text=prompt))
        for image in images:
            parts.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))
        return parts

    def generate(self, prompt: str, images: Sequence[ImagePayload]) -> GeneratedImage:
        """Send one generation request and return the resulting image.

        Blocks for the duration of the HTTPS call.

        Args:
            prompt: Effective prompt (may be empty when images are given).
            images: Input images in selection order.

        Returns:
            The generated image.

        Raises:
            MissingInputError: Neither a prompt nor an image was given.
            UpstreamError: The SDK call failed.
            ContentPolicyError: The request or the generation was blocked.
            EmptyResultError: The model answered without an image.
        """
        contents = self.build_contents(prompt, images)
        if not contents:
            raise MissingInputError()

        try:
            response = self._client.models.generate_content(model=self.model, contents=contents)
        except errors.APIError as e:
            logger.error(f"Gemini API error: {e}", exc_info=True)
            raise UpstreamError.from_status(e.message, e.code) from e
        except Exception as e:
            # Transport failures (timeouts, DNS, TLS) surface as non-SDK exceptions.
            logger.error(f"Gemini request failed: {e}", exc_info=True)
            raise UpstreamError.from_status(
                getattr(e, "message", None) or str(e), getattr(e, "status", None)
            ) from e

        return extract_image(response)
