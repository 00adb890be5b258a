"""Unit tests for UI input validation."""

import pytest

from umkm_studio.core.models import ContentType, DisplayStyle
from umkm_studio.ui.validation import (
    ValidationError,
    build_generation_request,
    load_image_file,
    sanitize_filename_input,
)


@pytest.fixture
def product_path(temp_dir, png_bytes):
    path = temp_dir / "kopi.png"
    path.write_bytes(png_bytes)
    return str(path)


def _form(product_path, **overrides):
    values = {
        "product_image": product_path,
        "product_name": "  Kopi Susu ",
        "product_description": "Kopi susu gula aren.",
        "seasonal_theme": "ramadan",
        "display_style": "minimal and bright",
        "content_type": "showcase",
        "price_info": " Rp15.000 ",
        "feature_1": "Halal",
    }
    values.update(overrides)
    return values


class TestBuildGenerationRequest:
    """Tests for build_generation_request."""

    def test_valid_form(self, product_path, png_bytes):
        request = build_generation_request(**_form(product_path))

        assert request.product_name == "Kopi Susu"
        assert request.product_image.data == png_bytes
        assert request.product_image.mime_type == "image/png"
        assert request.display_style is DisplayStyle.MINIMAL_BRIGHT
        assert request.content_type is ContentType.SHOWCASE
        assert request.price_info == "Rp15.000"
        assert request.seasonal_theme == "ramadan"
        assert request.logo_image is None
        assert request.can_submit()

    def test_with_logo(self, product_path, temp_dir):
        logo = temp_dir / "logo.jpg"
        logo.write_bytes(b"\xff\xd8\xff")

        request = build_generation_request(**_form(product_path, logo_image=str(logo)))

        assert request.logo_image.mime_type == "image/jpeg"

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("product_name", "  ", "Product name is required"),
            ("product_description", "", "Description is required"),
            ("display_style", "", "display style"),
            ("content_type", "poem", "content type"),
            ("product_image", None, "Product image is required"),
        ],
    )
    def test_invalid_form(self, product_path, field, value, message):
        with pytest.raises(ValidationError, match=message):
            build_generation_request(**_form(product_path, **{field: value}))


class TestLoadImageFile:
    def test_optional_missing(self):
        assert load_image_file(None, "Logo") is None

    def test_not_an_image(self, temp_dir):
        path = temp_dir / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValidationError, match="must be an image"):
            load_image_file(str(path), "Logo")

    def test_unreadable(self, temp_dir):
        with pytest.raises(ValidationError, match="Could not read"):
            load_image_file(str(temp_dir / "missing.png"), "Logo")

    def test_empty_file(self, temp_dir):
        path = temp_dir / "empty.png"
        path.write_bytes(b"")
        with pytest.raises(ValidationError, match="empty"):
            load_image_file(str(path), "Logo")


class TestSanitizeFilenameInput:
    def test_replaces_invalid_characters(self):
        assert sanitize_filename_input('Kopi "Susu"/Aren') == "Kopi__Susu__Aren"

    def test_empty_falls_back(self):
        assert sanitize_filename_input("") == "poster"
