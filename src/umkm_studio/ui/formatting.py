"""Formatting utilities for UMKM Studio UI output."""

import io
import logging

from PIL import Image

from umkm_studio.core.controller import format_rupiah
from umkm_studio.core.models import ImageBlob
from umkm_studio.core.workflow import PaymentPhase, Phase, WorkflowState

from .validation import ValidationError

logger = logging.getLogger(__name__)

_PHASE_MESSAGES = {
    Phase.IDLE: "*Fill in the form and click Generate Poster*",
    Phase.TEXT_GENERATING: "⏳ Designing poster...",
    Phase.TEXT_READY: "✅ **Caption ready.** Review it, then generate the poster image.",
    Phase.TEXT_FAILED: "❌ Text generation failed.",
    Phase.IMAGE_GENERATING: "⏳ Generating image...",
    Phase.IMAGE_READY: "✅ **Poster ready!**",
    Phase.IMAGE_FAILED: "❌ Image generation failed.",
}


def format_status(state: WorkflowState, license_amount: int | None = None) -> str:
    """Format the workflow status panel.

    Args:
        state: Current workflow state
        license_amount: Price shown next to an unpaid artifact, if any

    Returns:
        Markdown status text, with the last error appended when present
    """
    lines = [_PHASE_MESSAGES[state.phase]]

    payment = state.payment_phase
    if payment is PaymentPhase.PAYMENT_PENDING:
        lines.append("💳 Processing payment...")
    elif payment is PaymentPhase.PAID:
        lines.append("💳 **Commercial license:** paid")
    elif license_amount and state.generated_content is not None:
        lines.append(f"💳 **Commercial license:** {format_rupiah(license_amount)}")

    if state.last_error:
        lines.append(format_error(state.last_error))

    return "\n\n".join(lines)


def format_error(message: str) -> str:
    """Format a user-visible error message."""
    return f"❌ **Error:** {message}"


def format_validation_error(error: ValidationError) -> str:
    """Format validation error message.

    Args:
        error: Validation error

    Returns:
        Formatted error message
    """
    return f"❌ **Validation Error**\n\n{str(error)}"


def blob_to_pil(blob: ImageBlob | None) -> Image.Image | None:
    """Decode an image blob for display.

    Args:
        blob: Image bytes, or None

    Returns:
        PIL image, or None if there is nothing to show or the bytes are not
        a decodable image
    """
    if not blob:
        return None
    try:
        image = Image.open(io.BytesIO(blob.data))
        image.load()
    except (OSError, ValueError) as e:
        logger.error(f"Could not decode generated image: {e}")
        return None
    return image
