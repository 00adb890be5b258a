"""Tests for umkm_studio.core.config - configuration management.

Tests cover:
- Default values for the payment and generation settings.
- Environment variable overrides via the UMKM_ prefix.
- Download directory creation when one is configured.
- Midtrans server key resolution per mode.
- Pydantic validation constraints.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from umkm_studio.core.config import StudioConfig


def _config(temp_dir: Path, **kwargs) -> StudioConfig:
    return StudioConfig(download_dir=temp_dir / "downloads", _env_file=None, **kwargs)


class TestConfigDefaults:
    """Verify that StudioConfig provides sensible defaults."""

    def test_not_production_by_default(self, monkeypatch, temp_dir: Path):
        monkeypatch.delenv("UMKM_IS_PRODUCTION", raising=False)
        assert _config(temp_dir).is_production is False

    def test_license_defaults(self, test_config: StudioConfig):
        """The single price point is 7500 IDR for the poster license."""
        assert test_config.license_label == "UMKM GenAI Poster License"
        assert test_config.license_amount == 7500

    def test_paywall_defaults(self, test_config: StudioConfig):
        assert test_config.paywall_step == "image"
        assert test_config.auto_chain_image is False

    def test_poster_aspect_ratio(self, test_config: StudioConfig):
        assert test_config.image_aspect_ratio == "3:4"

    def test_gateway_server_port(self, test_config: StudioConfig):
        assert test_config.server_port == 4000

    def test_mode_label(self, temp_dir: Path):
        assert _config(temp_dir).mode_label == "SANDBOX"
        assert _config(temp_dir, is_production=True).mode_label == "PRODUCTION"


class TestEnvironmentOverrides:
    """Environment variables with the UMKM_ prefix override defaults."""

    def test_is_production_from_env(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("UMKM_IS_PRODUCTION", "true")
        assert _config(temp_dir).is_production is True

    def test_gateway_url_from_env(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("UMKM_GATEWAY_URL", "http://localhost:4000")
        assert _config(temp_dir).gateway_url == "http://localhost:4000"

    def test_paywall_step_from_env(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("UMKM_PAYWALL_STEP", "download")
        assert _config(temp_dir).paywall_step == "download"


class TestDirectoryCreation:
    """A configured download directory is created on initialisation."""

    def test_download_dir_created(self, temp_dir: Path):
        downloads = temp_dir / "nested" / "downloads"
        StudioConfig(download_dir=downloads, _env_file=None)
        assert downloads.is_dir()

    def test_download_dir_defaults_to_system_temp(self, monkeypatch):
        monkeypatch.delenv("UMKM_DOWNLOAD_DIR", raising=False)
        assert StudioConfig(_env_file=None).download_dir is None


class TestResolveServerKey:
    """Mode-specific Midtrans keys win over the shared key."""

    @pytest.fixture(autouse=True)
    def _clear_env(self, monkeypatch):
        for name in (
            "UMKM_MIDTRANS_SERVER_KEY",
            "UMKM_MIDTRANS_SERVER_KEY_SANDBOX",
            "UMKM_MIDTRANS_SERVER_KEY_PRODUCTION",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_sandbox_key_preferred(self, temp_dir: Path):
        cfg = _config(
            temp_dir, midtrans_server_key="shared", midtrans_server_key_sandbox="sandbox"
        )
        assert cfg.resolve_server_key() == "sandbox"

    def test_production_key_preferred(self, temp_dir: Path):
        cfg = _config(
            temp_dir,
            is_production=True,
            midtrans_server_key="shared",
            midtrans_server_key_sandbox="sandbox",
            midtrans_server_key_production="production",
        )
        assert cfg.resolve_server_key() == "production"

    def test_shared_key_fallback(self, temp_dir: Path):
        cfg = _config(temp_dir, is_production=True, midtrans_server_key="shared")
        assert cfg.resolve_server_key() == "shared"

    def test_sandbox_key_not_used_in_production(self, temp_dir: Path):
        cfg = _config(temp_dir, is_production=True, midtrans_server_key_sandbox="sandbox")
        assert cfg.resolve_server_key() is None

    def test_no_keys(self, temp_dir: Path):
        assert _config(temp_dir).resolve_server_key() is None


class TestValidation:
    """Pydantic constraints reject invalid values."""

    def test_license_amount_must_be_positive(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            _config(temp_dir, license_amount=0)

    def test_paywall_step_literal(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            _config(temp_dir, paywall_step="text")

    def test_port_range(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            _config(temp_dir, server_port=70000)
