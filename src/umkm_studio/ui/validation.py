"""Validation utilities for UMKM Studio UI inputs."""

import logging
import mimetypes
from pathlib import Path

from umkm_studio.core.models import ContentType, DisplayStyle, GenerationRequest, ImageBlob

logger = logging.getLogger(__name__)

# Largest accepted upload, in bytes
MAX_IMAGE_BYTES = 10 * 1024 * 1024


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def load_image_file(
    path: str | Path | None, label: str, required: bool = False
) -> ImageBlob | None:
    """Read an uploaded image from disk.

    Args:
        path: Filepath provided by the Gradio image component
        label: Field name used in error messages
        required: Whether a missing upload is an error

    Returns:
        The image, or None if nothing was uploaded and it is optional

    Raises:
        ValidationError: If the file is missing, unreadable, too large, or not an image
    """
    if not path:
        if required:
            raise ValidationError(f"{label} is required")
        return None

    file_path = Path(path)
    mime_type, _ = mimetypes.guess_type(file_path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError(f"{label} must be an image file")

    try:
        data = file_path.read_bytes()
    except OSError as e:
        logger.warning(f"Could not read upload {file_path}: {e}")
        raise ValidationError(f"Could not read {label.lower()}") from e

    if not data:
        raise ValidationError(f"{label} is empty")
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError(f"{label} is too large (max {MAX_IMAGE_BYTES // (1024 * 1024)} MB)")

    return ImageBlob(data=data, mime_type=mime_type, filename=file_path.name)


def build_generation_request(
    product_image: str | None,
    product_name: str,
    product_description: str,
    seasonal_theme: str,
    display_style: str,
    content_type: str,
    price_info: str = "",
    promo_info: str = "",
    feature_1: str = "",
    feature_2: str = "",
    feature_3: str = "",
    logo_image: str | None = None,
) -> GenerationRequest:
    """Validate the form and build a generation request.

    Args:
        product_image: Filepath of the product photo
        product_name: Product name
        product_description: Short description
        seasonal_theme: Seasonal theme value ("" for none)
        display_style: DisplayStyle value
        content_type: ContentType value
        price_info: Optional price text
        promo_info: Optional promo text
        feature_1: Optional feature
        feature_2: Optional feature
        feature_3: Optional feature
        logo_image: Optional filepath of the brand logo

    Returns:
        The validated request

    Raises:
        ValidationError: If a required field is missing or a value is invalid
    """
    if not product_name or not product_name.strip():
        raise ValidationError("Product name is required")
    if not product_description or not product_description.strip():
        raise ValidationError("Description is required")

    try:
        style = DisplayStyle(display_style)
    except ValueError as e:
        raise ValidationError("Please select a display style") from e
    try:
        kind = ContentType(content_type)
    except ValueError as e:
        raise ValidationError("Please select a content type") from e

    image = load_image_file(product_image, "Product image", required=True)
    logo = load_image_file(logo_image, "Logo")

    return GenerationRequest(
        product_name=product_name.strip(),
        product_image=image,
        product_description=product_description.strip(),
        display_style=style,
        content_type=kind,
        price_info=(price_info or "").strip(),
        promo_info=(promo_info or "").strip(),
        feature_1=(feature_1 or "").strip(),
        feature_2=(feature_2 or "").strip(),
        feature_3=(feature_3 or "").strip(),
        seasonal_theme=seasonal_theme or "",
        logo_image=logo,
    )


def sanitize_filename_input(text: str) -> str:
    """Sanitize user input for use in filenames.

    Args:
        text: User input text

    Returns:
        Sanitized text safe for filenames
    """
    invalid_chars = '<>:"/\\|?* '
    for char in invalid_chars:
        text = text.replace(char, "_")

    return text[:100] or "poster"
