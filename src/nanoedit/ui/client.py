"""HTTP client the upload widget uses to reach ``POST /api/upload``.

One call to :meth:`UploadClient.submit` issues exactly one multipart request:
every selected image as a ``files`` part plus a ``prompt`` field.  Failures
are raised as :class:`UploadError` carrying the server's ``error`` message
verbatim.  There is no retry.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from nanoedit.api.models import UploadResponse

from .models import SelectedFile

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """The upload request failed.

    The message is shown to the user verbatim.

    Attributes:
        status_code: HTTP status of the failed response, or ``None`` for
            transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class UploadResult:
    """Decoded success response.

    Attributes:
        image: Generated image bytes, or ``None`` if the server sent none
        mime_type: MIME type of *image*
        size: Total input bytes reported by the server
    """

    image: bytes | None
    mime_type: str
    size: int | None


def _error_message(response: httpx.Response) -> str:
    """Extract ``error`` from a failure body, defaulting to ``"Upload failed"``."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return "Upload failed"


class UploadClient:
    """Submits the selection and prompt to the server route.

    Attributes:
        upload_url: Absolute URL of ``POST /api/upload``
    """

    def __init__(
        self,
        upload_url: str,
        timeout: float = 120.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            upload_url: Absolute URL of the upload route
            timeout: Request timeout in seconds
            http_client: Pre-configured ``httpx.Client`` (one is created per
                request when omitted)
        """
        self.upload_url = upload_url
        self.timeout = timeout
        self._http_client = http_client

    def _post(self, **kwargs) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.post(self.upload_url, timeout=self.timeout, **kwargs)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.upload_url, **kwargs)

    def submit(self, prompt: str, files: Sequence[SelectedFile]) -> UploadResult:
        """Send one generation request.

        Args:
            prompt: Prompt text as typed (sent even when empty)
            files: Selection set, in order

        Returns:
            UploadResult with the decoded image

        Raises:
            UploadError: On a non-2xx response, a transport failure, or a
                malformed success body
        """
        parts = [("files", (f.name, f.path.read_bytes(), f.mime_type)) for f in files]
        logger.info(f"Submitting {len(parts)} file(s) to {self.upload_url}")

        try:
            response = self._post(data={"prompt": prompt}, files=parts)
        except httpx.HTTPError as e:
            logger.error(f"Upload request failed: {e}")
            raise UploadError(str(e) or "Upload failed") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(f"Upload rejected ({response.status_code}): {message}")
            raise UploadError(message, status_code=response.status_code)

        try:
            payload = UploadResponse.model_validate(response.json())
            image = base64.b64decode(payload.image_base64, validate=True)
        except ValueError as e:
            logger.error(f"Malformed upload response: {e}")
            raise UploadError("Unexpected response from server") from e

        return UploadResult(
            image=image or None,
            mime_type=payload.mime_type or "image/png",
            size=payload.size,
        )
