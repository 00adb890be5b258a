"""Caption and poster generation handlers."""

import logging

import gradio as gr

from ..formatting import blob_to_pil, format_status, format_validation_error
from ..models import UIState
from ..state import initialize_ui_state
from ..validation import ValidationError, build_generation_request
from .payment import run_with_confirmation

logger = logging.getLogger(__name__)


def _content_outputs(state: UIState) -> tuple[str, str, str]:
    content = state.controller.state.generated_content
    if content is None:
        return "", "", ""
    return content.caption, content.hashtags, content.image_prompt


async def generate_poster_text(
    product_image: str | None,
    product_name: str,
    product_description: str,
    seasonal_theme: str,
    display_style: str,
    content_type: str,
    price_info: str,
    promo_info: str,
    feature_1: str,
    feature_2: str,
    feature_3: str,
    logo_image: str | None,
    state: UIState,
):
    """Validate the form and generate caption, hashtags and image prompt.

    A new generation replaces the previous poster and its license.

    Returns:
        Tuple of (status, caption, hashtags, image_prompt, poster, state)
    """
    state = initialize_ui_state(state)
    controller = state.controller

    try:
        request = build_generation_request(
            product_image,
            product_name,
            product_description,
            seasonal_theme,
            display_style,
            content_type,
            price_info,
            promo_info,
            feature_1,
            feature_2,
            feature_3,
            logo_image,
        )
    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        skipped = gr.update()
        return (format_validation_error(e), skipped, skipped, skipped, skipped, state)

    workflow = await controller.submit_generation(request)
    caption, hashtags, image_prompt = _content_outputs(state)

    return (
        format_status(workflow, controller.license_amount),
        caption,
        hashtags,
        image_prompt,
        blob_to_pil(workflow.generated_image),
        state,
    )


def edit_generated_content(caption: str, hashtags: str, image_prompt: str, state: UIState):
    """Store the user's edits to the generated text.

    Returns:
        Tuple of (status, state)
    """
    state = initialize_ui_state(state)
    controller = state.controller

    if controller.state.generated_content is None:
        return gr.update(), state

    workflow = controller.edit_content(
        caption=caption or "", hashtags=hashtags or "", image_prompt=image_prompt or ""
    )
    return format_status(workflow, controller.license_amount), state


async def generate_poster_image(state: UIState):
    """Generate the poster image, paying first when the image step is paywalled.

    Yields:
        Tuples of (status, poster, confirmation_group, confirmation_message, state)
    """
    state = initialize_ui_state(state)
    controller = state.controller

    async for finished, value in run_with_confirmation(state, controller.generate_image()):
        if not finished:
            yield (
                format_status(controller.state),
                gr.update(),
                gr.update(visible=True),
                gr.update(value=value),
                state,
            )
            continue

        yield (
            format_status(value, controller.license_amount),
            blob_to_pil(value.generated_image),
            gr.update(visible=False),
            gr.update(value=""),
            state,
        )
