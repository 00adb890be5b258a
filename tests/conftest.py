"""Shared pytest fixtures for UMKM Studio tests."""

import io
import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, Mock

import pytest
from PIL import Image

from umkm_studio.core.config import StudioConfig
from umkm_studio.core.controller import GenerationController
from umkm_studio.core.models import (
    ContentType,
    DisplayStyle,
    GeneratedContent,
    GenerationRequest,
    ImageBlob,
)
from umkm_studio.core.payment import MOCK_TOKEN, classify_token
from umkm_studio.ui.models import UIState


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


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
def test_config(temp_dir: Path) -> StudioConfig:
    """Create a non-production configuration with a temporary download directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        StudioConfig instance for testing
    """
    return StudioConfig(
        download_dir=temp_dir / "downloads",
        gemini_api_key="test-key",
        gateway_url=None,
        midtrans_server_key=None,
        midtrans_server_key_sandbox=None,
        midtrans_server_key_production=None,
        simulated_dialog_delay=0,
        _env_file=None,
    )


@pytest.fixture
def png_bytes() -> bytes:
    """A small, real PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 12), color=(200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def product_image(png_bytes: bytes) -> ImageBlob:
    return ImageBlob(data=png_bytes, mime_type="image/png", filename="kopi.png")


@pytest.fixture
def kopi_request(product_image: ImageBlob) -> GenerationRequest:
    """The Kopi Susu form submission used across controller tests."""
    return GenerationRequest(
        product_name="Kopi Susu",
        product_image=product_image,
        product_description="Kopi susu gula aren, creamy dan manis.",
        display_style=DisplayStyle.MINIMAL_BRIGHT,
        content_type=ContentType.SHOWCASE,
        price_info="Rp15.000",
        promo_info="Diskon 20%",
        feature_1="Halal",
    )


@pytest.fixture
def kopi_content() -> GeneratedContent:
    return GeneratedContent(
        image_prompt="A glass of iced palm-sugar coffee on a bright wooden table",
        caption="Segarnya Kopi Susu gula aren, cuma Rp15.000!",
        hashtags="#kopisusu #umkm #kopigulaaren",
    )


@pytest.fixture
def text_generator(kopi_content: GeneratedContent) -> Mock:
    """Text collaborator that returns the Kopi Susu content."""
    return Mock(generate_content=AsyncMock(return_value=kopi_content))


@pytest.fixture
def image_generator(png_bytes: bytes) -> Mock:
    """Image collaborator that returns a PNG poster."""
    poster = ImageBlob(data=png_bytes, mime_type="image/png")
    return Mock(generate_visual=AsyncMock(return_value=poster))


@pytest.fixture
def gateway() -> Mock:
    """Session issuer that always returns the mock token."""
    return Mock(
        create_session=AsyncMock(
            side_effect=lambda label, amount: classify_token(MOCK_TOKEN, label, amount)
        )
    )


@pytest.fixture
def make_controller(text_generator: Mock, image_generator: Mock, gateway: Mock):
    """Factory for controllers wired to the fake collaborators.

    Keyword arguments are passed through to :class:`GenerationController`.
    """

    def _make(**kwargs) -> GenerationController:
        kwargs.setdefault("dialog_delay", 0)
        return GenerationController(text_generator, image_generator, gateway, **kwargs)

    return _make


@pytest.fixture
def ui_state() -> UIState:
    """Create empty UI state for testing.

    Returns:
        UIState instance
    """
    return UIState()
