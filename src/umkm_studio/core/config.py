"""Configuration management for UMKM GenAI Studio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the UMKM_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (UMKM_* prefix)
2. .env file in the project root
3. Default values defined in StudioConfig

Example .env file:
    UMKM_IS_PRODUCTION=false
    UMKM_GEMINI_API_KEY=...
    UMKM_GATEWAY_URL=http://localhost:4000
    UMKM_MIDTRANS_SERVER_KEY_SANDBOX=SB-Mid-server-...

Production vs. Non-Production
-----------------------------
A single boolean, ``is_production``, decides whether simulated payments are
allowed. Outside production a missing gateway URL or Midtrans server key
degrades to the sentinel mock token so the whole flow can be exercised
locally. In production the same conditions are configuration errors.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from umkm_studio.core.config import config

    print(config.gateway_url)
    print(config.license_amount)
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StudioConfig(BaseSettings):
    """Main configuration for UMKM GenAI Studio.

    Attributes
    ----------
    Deployment:
        is_production : bool
            Production deployments never accept mock payment tokens

    Generative AI:
        gemini_api_key : str | None
            Google Gemini API key (text and image generation)
        text_model_id : str
            Model used for caption, hashtags and image prompt
        image_model_id : str
            Model used for the poster image
        image_aspect_ratio : str
            Aspect ratio requested for posters (vertical, mobile-first)

    Payment:
        gateway_url : str | None
            Base URL of the transaction gateway used by the UI
        gateway_timeout : float
            Timeout for gateway requests in seconds
        midtrans_server_key* : str | None
            Midtrans server keys (see resolve_server_key)
        license_label / license_amount : str / int
            The deployment's single price point
        paywall_step : Literal["image", "download"]
            Which step requires payment
        auto_chain_image : bool
            Continue into image generation right after text generation
            (only when the image step is not behind the paywall)

    Servers:
        server_host / server_port : gateway bind address
        gradio_server_name / gradio_server_port / gradio_share : UI bind address

    Paths:
        download_dir : Path | None
            Where temporary download files are created (system temp
            directory when unset)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UMKM_",
        case_sensitive=False,
        extra="ignore",
    )

    # Deployment mode
    is_production: bool = Field(
        default=False,
        description="Production mode (mock payment tokens are fatal)",
    )

    # Generative AI settings
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )
    text_model_id: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model for structured marketing content",
    )
    image_model_id: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini model for poster images",
    )
    image_aspect_ratio: str = Field(
        default="3:4",
        description="Poster aspect ratio",
    )

    # Transaction gateway (client side)
    gateway_url: str | None = Field(
        default=None,
        description="Base URL of the transaction gateway (e.g. http://localhost:4000)",
    )
    gateway_timeout: float = Field(default=15.0, gt=0)

    # Midtrans credentials (gateway side)
    midtrans_server_key: str | None = Field(default=None)
    midtrans_server_key_sandbox: str | None = Field(default=None)
    midtrans_server_key_production: str | None = Field(default=None)
    midtrans_client_key: str | None = Field(default=None)

    # Pricing and paywall
    license_label: str = Field(
        default="UMKM GenAI Poster License",
        description="Item name used when no product name is given",
    )
    license_amount: int = Field(
        default=7500,
        description="Price of one poster license in IDR",
        gt=0,
    )
    paywall_step: Literal["image", "download"] = Field(
        default="image",
        description="Step that requires payment",
    )
    auto_chain_image: bool = Field(
        default=False,
        description="Generate the image right after the text when not paywalled",
    )
    simulated_dialog_delay: float = Field(
        default=0.05,
        description="Delay before the simulated checkout dialog (seconds)",
        ge=0,
    )

    # Gateway server settings
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=4000, ge=1, le=65535)
    cors_allow_origins: list[str] = Field(default=["*"])

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    # Paths
    download_dir: Path | None = Field(
        default=None,
        description="Directory for temporary download files (default: system temp)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the download directory if one is set."""
        super().__init__(**kwargs)
        if self.download_dir is not None:
            self.download_dir.mkdir(parents=True, exist_ok=True)

    @property
    def mode_label(self) -> str:
        """Midtrans mode name for logs and health checks."""
        return "PRODUCTION" if self.is_production else "SANDBOX"

    def resolve_server_key(self) -> str | None:
        """Pick the Midtrans server key for the current mode.

        The mode-specific key wins; ``midtrans_server_key`` is the shared
        fallback for both modes.
        """
        if self.is_production:
            return self.midtrans_server_key_production or self.midtrans_server_key
        return self.midtrans_server_key_sandbox or self.midtrans_server_key


# Global configuration instance
# Loads values from environment variables (UMKM_* prefix) and .env file.
config = StudioConfig()
