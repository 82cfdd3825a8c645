"""Core functionality for Nano Edit.

- **NanoEditConfig** / **config**: configuration management using Pydantic Settings
- **GeminiImageClient**: wrapper around the external Gemini image model
- **errors**: exceptions carrying the message and status reported to the widget

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - Settings prefixed with NANOEDIT_, plus the conventional GEMINI_API_KEY

2. **External API Layer** (gemini_client.py):
   - Request shaping (prompt part + inline image parts)
   - Response inspection (policy blocks, missing image)

3. **Error Layer** (errors.py):
   - One exception per failure category, each with its HTTP status
"""

from nanoedit.core.config import NanoEditConfig, config
from nanoedit.core.errors import (
    ConfigurationError,
    ContentPolicyError,
    EmptyResultError,
    MissingInputError,
    NanoEditError,
    PayloadTooLargeError,
    UpstreamError,
)
from nanoedit.core.gemini_client import GeminiImageClient, GeneratedImage, ImagePayload

__all__ = [
    "NanoEditConfig",
    "config",
    "GeminiImageClient",
    "GeneratedImage",
    "ImagePayload",
    "NanoEditError",
    "MissingInputError",
    "PayloadTooLargeError",
    "ConfigurationError",
    "UpstreamError",
    "ContentPolicyError",
    "EmptyResultError",
]
