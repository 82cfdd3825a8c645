"""Exceptions raised while handling a generation request.

Every error carries a human-readable ``message`` and the HTTP
``status_code`` the server route reports it with.  The FastAPI exception
handler in :mod:`nanoedit.api.main` turns any :class:`NanoEditError` into
an ``{"error": message}`` JSON body.
"""

from __future__ import annotations


class NanoEditError(Exception):
    """Base class for errors reported to the upload widget."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MissingInputError(NanoEditError):
    """Neither a prompt nor an image was supplied."""

    status_code = 400
    default_message = "Provide a prompt or at least one image."


class PayloadTooLargeError(NanoEditError):
    """The uploaded images exceed the configured byte budget."""

    status_code = 413
    default_message = "Selected images are too large."


class ConfigurationError(NanoEditError):
    """The server cannot reach the external API as configured."""

    status_code = 500
    default_message = "Server misconfigured: GEMINI_API_KEY missing"


class UpstreamError(NanoEditError):
    """The call to the external generation API failed."""

    status_code = 502
    default_message = "Failed to generate image"

    @classmethod
    def from_status(cls, message: str | None, status: object) -> UpstreamError:
        """Build an error, keeping *status* only when it is a 4xx/5xx code.

        Args:
            message: Error text reported by the SDK (may be empty).
            status: Status code reported by the SDK, of any type.

        Returns:
            UpstreamError with the SDK status, or 502 when it is unusable.
        """
        if isinstance(status, int) and not isinstance(status, bool) and 400 <= status < 600:
            return cls(message, status)
        return cls(message)


class ContentPolicyError(NanoEditError):
    """The prompt or the generation was blocked by the model's policy."""

    status_code = 400
    default_message = "Request blocked"


class EmptyResultError(NanoEditError):
    """The model answered without an image part."""

    status_code = 400
    default_message = "Model returned no image"
