"""Pydantic response models for the Nano Edit API.

These models define the JSON bodies of ``POST /api/upload``.  Field names
follow the camelCase contract consumed by the upload widget.

Models
------
UploadResponse
    Success body - the generated image as base64 plus its MIME type.
ErrorResponse
    Failure body - a single human-readable ``error`` message.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Response body for a successful ``POST /api/upload``.

    Attributes:
        ok: Always ``True`` on success.
        size: Total bytes of the uploaded images, or ``None`` when no images
            (or only empty ones) were sent.
        image_base64: Generated image, base64-encoded (JSON key ``imageBase64``).
        mime_type: MIME type of the generated image (JSON key ``mimeType``).
    """

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = Field(default=True, description="True on success.")
    size: int | None = Field(
        default=None,
        description="Total bytes of the uploaded images, if any.",
    )
    image_base64: str = Field(
        ...,
        alias="imageBase64",
        description="Generated image encoded as base64.",
    )
    mime_type: str = Field(
        default="image/png",
        alias="mimeType",
        description="MIME type of the generated image.",
    )


class ErrorResponse(BaseModel):
    """Response body for a failed ``POST /api/upload``.

    Attributes:
        error: Message shown verbatim to the user.
    """

    error: str = Field(..., description="Human-readable error message.")
