"""Gradio UI for UMKM GenAI Studio."""

import logging

import gradio as gr

from umkm_studio.core.config import config
from umkm_studio.core.controller import format_rupiah

from .handlers import (
    confirm_payment,
    decline_payment,
    download_poster,
    edit_generated_content,
    generate_poster_image,
    generate_poster_text,
)
from .models import (
    CONTENT_TYPE_CHOICES,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_DISPLAY_STYLE,
    DISPLAY_STYLE_CHOICES,
    SEASONAL_THEME_CHOICES,
    UIState,
)
from .state import cleanup_ui_state

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="UMKM GenAI Studio")

    with app:
        # Session state - one instance per user, cleaned up when the session ends
        ui_state = gr.State(UIState(), delete_callback=cleanup_ui_state)

        gr.Markdown(
            """
            # UMKM GenAI Studio
            ### Marketing posters and captions for small businesses
            """
        )

        create_form(ui_state)

    return app


def create_form(ui_state):
    """Create the product form, results panel, and their event wiring.

    Args:
        ui_state: UI state component
    """
    with gr.Row():
        with gr.Column(scale=1):
            gr.Markdown("### Product Details")

            product_image = gr.Image(
                label="Product Image (Required)",
                type="filepath",
                sources=["upload", "clipboard"],
                height=250,
            )
            product_name = gr.Textbox(
                label="Product Name",
                placeholder="e.g. Kopi Susu Gula Aren",
            )
            product_description = gr.Textbox(
                label="Description (Short)",
                placeholder="e.g. Dibuat dari biji kopi arabika pilihan dan gula aren asli.",
                lines=3,
            )
            seasonal_theme = gr.Dropdown(
                label="Seasonal Theme (Optional)",
                choices=SEASONAL_THEME_CHOICES,
                value="",
            )

            with gr.Row():
                display_style = gr.Dropdown(
                    label="Display Style",
                    choices=DISPLAY_STYLE_CHOICES,
                    value=DEFAULT_DISPLAY_STYLE,
                )
                content_type = gr.Dropdown(
                    label="Content Type",
                    choices=CONTENT_TYPE_CHOICES,
                    value=DEFAULT_CONTENT_TYPE,
                )

            with gr.Row():
                price_info = gr.Textbox(label="Price Info (Optional)", placeholder="e.g. Rp15.000")
                promo_info = gr.Textbox(
                    label="Promo Info (Optional)", placeholder="e.g. Diskon 20%"
                )

            with gr.Accordion("Key Features (Optional)", open=False):
                feature_1 = gr.Textbox(show_label=False, placeholder="Feature 1 (e.g. Halal)")
                feature_2 = gr.Textbox(
                    show_label=False, placeholder="Feature 2 (e.g. Tanpa Pengawet)"
                )
                feature_3 = gr.Textbox(show_label=False, placeholder="Feature 3 (e.g. Fresh Made)")

            logo_image = gr.Image(
                label="Brand Logo (Optional)",
                type="filepath",
                sources=["upload"],
                height=120,
            )

            generate_btn = gr.Button("Generate Poster", variant="primary")

        with gr.Column(scale=1):
            gr.Markdown("### Result")

            status_output = gr.Markdown(value="*Fill in the form and click Generate Poster*")

            caption_output = gr.Textbox(
                label="Caption", lines=6, interactive=True, show_copy_button=True
            )
            hashtags_output = gr.Textbox(
                label="Hashtags", lines=2, interactive=True, show_copy_button=True
            )
            with gr.Accordion("Image Prompt", open=False):
                image_prompt_output = gr.Textbox(show_label=False, lines=4, interactive=True)

            image_label = "Generate Image"
            if config.paywall_step == "image":
                image_label = f"Pay {format_rupiah(config.license_amount)} & Generate Image"
            image_btn = gr.Button(image_label, variant="primary")

            poster_output = gr.Image(label="Poster", type="pil", interactive=False, height=480)

            download_label = "Download Poster"
            if config.paywall_step == "download":
                download_label = f"Pay {format_rupiah(config.license_amount)} & Download"
            download_btn = gr.Button(download_label, variant="secondary")
            download_file = gr.File(label="Poster File", visible=False, interactive=False)

            # Simulated checkout dialog, shown while a payment waits for an answer
            with gr.Group(visible=False) as confirm_group:
                confirm_message = gr.Markdown()
                with gr.Row():
                    confirm_btn = gr.Button("Confirm Payment", variant="primary")
                    cancel_btn = gr.Button("Cancel", variant="stop")

    form_inputs = [
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
        ui_state,
    ]

    generate_btn.click(
        fn=generate_poster_text,
        inputs=form_inputs,
        outputs=[
            status_output,
            caption_output,
            hashtags_output,
            image_prompt_output,
            poster_output,
            ui_state,
        ],
    )

    # User edits only; programmatic updates do not fire .input
    for textbox in (caption_output, hashtags_output, image_prompt_output):
        textbox.input(
            fn=edit_generated_content,
            inputs=[caption_output, hashtags_output, image_prompt_output, ui_state],
            outputs=[status_output, ui_state],
        )

    # Payment events must run while the pay/download handler is still waiting
    image_btn.click(
        fn=generate_poster_image,
        inputs=[ui_state],
        outputs=[status_output, poster_output, confirm_group, confirm_message, ui_state],
        concurrency_limit=None,
    )
    download_btn.click(
        fn=download_poster,
        inputs=[ui_state],
        outputs=[status_output, download_file, confirm_group, confirm_message, ui_state],
        concurrency_limit=None,
    )
    confirm_btn.click(
        fn=confirm_payment,
        inputs=[ui_state],
        outputs=[confirm_group, ui_state],
        concurrency_limit=None,
    )
    cancel_btn.click(
        fn=decline_payment,
        inputs=[ui_state],
        outputs=[confirm_group, ui_state],
        concurrency_limit=None,
    )


def main():
    """Main entry point for the application."""
    logger.info("Starting UMKM GenAI Studio...")
    logger.info(
        f"Configuration: mode={config.mode_label}, paywall={config.paywall_step}, "
        f"gateway={config.gateway_url or '(not set)'}"
    )

    app = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.queue().launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
    )


if __name__ == "__main__":
    main()
