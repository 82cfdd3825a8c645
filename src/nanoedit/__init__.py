"""Nano Edit - upload images, describe an edit, get a generated image back."""

__version__ = "0.1.0"

from nanoedit.core.config import NanoEditConfig, config
from nanoedit.core.gemini_client import GeminiImageClient, GeneratedImage, ImagePayload

__all__ = [
    "NanoEditConfig",
    "config",
    "GeminiImageClient",
    "GeneratedImage",
    "ImagePayload",
]
