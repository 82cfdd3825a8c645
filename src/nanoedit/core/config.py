"""Configuration management for Nano Edit.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the NANOEDIT_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (NANOEDIT_* prefix)
2. .env file in the project root
3. Default values defined in NanoEditConfig

The Gemini API key is the one exception to the prefix rule: it is read from
the conventional ``GEMINI_API_KEY`` variable (``NANOEDIT_GEMINI_API_KEY`` is
accepted too).

Example .env file:
    GEMINI_API_KEY=your-key-here
    NANOEDIT_GEMINI_MODEL=gemini-2.5-flash-image-preview
    NANOEDIT_MAX_FILES=3
    NANOEDIT_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from nanoedit.core.config import config

    print(config.gemini_model)
    print(config.upload_url)

Selection Limits
----------------
``max_files`` and ``max_total_bytes`` bound what the upload widget accepts.
The server route enforces the byte budget again on the bytes it actually
receives.
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NanoEditConfig(BaseSettings):
    """Main configuration for Nano Edit.

    Values are loaded from environment variables with the NANOEDIT_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    External API:
        gemini_api_key : str | None
            Key for the Gemini API.  ``None`` leaves the server misconfigured;
            requests then fail with a 500 instead of reaching the API.
        gemini_model : str
            Gemini model used for image generation and editing.

    Selection Limits:
        max_files : int
            Maximum number of images in one selection (1-16)
        max_total_bytes : int
            Maximum combined size of a selection, in bytes

    Client:
        request_timeout : float
            Seconds the upload widget waits for the server route
        api_base_url : str | None
            Base URL of the server route.  ``None`` means the local server
            on ``server_port``.

    Paths:
        outputs_dir : Path
            Directory for generated results offered for download

    Server:
        server_host : str
            Bind address (0.0.0.0 for local network)
        server_port : int
            Server port (1024-65535)
        ui_path : str
            Path the Gradio page is mounted under
        log_level : str
            Root logging level used by the CLI entry point

    Examples
    --------
    Create a custom configuration:

        >>> custom_config = NanoEditConfig(
        ...     gemini_api_key="test-key",
        ...     max_files=5,
        ... )
        >>> custom_config.upload_url
        'http://127.0.0.1:7860/api/upload'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NANOEDIT_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # External API
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "NANOEDIT_GEMINI_API_KEY"),
        description="API key for the Gemini image model",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash-image-preview",
        description="Gemini model ID used for generation",
    )

    # Selection limits
    max_files: int = Field(
        default=3,
        description="Maximum number of images per selection",
        ge=1,
        le=16,
    )
    max_total_bytes: int = Field(
        default=20 * 1024 * 1024,
        description="Maximum combined size of the selected images in bytes",
        gt=0,
    )

    # Client settings
    request_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for the widget's request to the server route",
        gt=0,
    )
    api_base_url: str | None = Field(
        default=None,
        description="Base URL of the server route (defaults to the local server)",
    )

    # Paths
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory to save generated results for download",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    ui_path: str = Field(
        default="/ui",
        description="Mount path of the Gradio page",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level for the CLI entry point",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the outputs directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def upload_url(self) -> str:
        """Full URL of the ``POST /api/upload`` route."""
        base = self.api_base_url or f"http://127.0.0.1:{self.server_port}"
        return f"{base.rstrip('/')}/api/upload"


# Global configuration instance
# Loads values from environment variables (NANOEDIT_* prefix, plus GEMINI_API_KEY)
# and the .env file.
config = NanoEditConfig()
