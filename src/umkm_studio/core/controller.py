"""Generation controller: sequences text, image and payment for one session.

The controller is the only writer of the session's
:class:`~umkm_studio.core.workflow.WorkflowState`.  Every public operation
catches failures at its boundary and turns them into a single user-visible
``last_error`` string; nothing but task cancellation escapes.

Request Sequence
----------------
1. :meth:`GenerationController.submit_generation` - text generation
   (resets the artifact and the paid flag).
2. :meth:`GenerationController.generate_image` - optional paywall, then
   :meth:`GenerationController.request_image`.
3. :meth:`GenerationController.download_artifact` - optional paywall, then
   the poster bytes.

Which of steps 2 and 3 sits behind the paywall is set by ``paywall_step``.

Payment Branches
----------------
``initiate_payment`` asks the gateway for a token and branches on the
tagged result:

- **Mock token** - outside production, wait a short delay and ask the
  ``confirm`` callback (the simulated checkout dialog).  In production this
  is a fatal misconfiguration.
- **Real token with widget** - run the widget; success or pending marks the
  artifact paid, error sets an error, close does nothing.
- **Real token without widget** - outside production, fall back to the
  simulated dialog.  In production this is fatal.

``payment_in_flight`` is released on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal

from .config import StudioConfig
from .genai import GeminiContentService
from .models import GenerationRequest, ImageBlob
from .payment import (
    GatewayClient,
    MockToken,
    PaymentWidget,
    RealToken,
    TokenError,
    WidgetOutcome,
    run_payment_widget,
)
from .protocols import ConfirmCallback, ImageGenerator, SessionIssuer, TextGenerator
from .workflow import (
    ContentEdited,
    ErrorCleared,
    ErrorRaised,
    Event,
    ImageFailed,
    ImageReleased,
    ImageRequested,
    ImageSucceeded,
    PaymentReleased,
    PaymentStarted,
    PaymentSucceeded,
    TextFailed,
    TextRequested,
    TextSucceeded,
    WorkflowState,
    reduce,
)

logger = logging.getLogger(__name__)


STALE_PAYMENT_MESSAGE = "Poster changed during checkout, please pay again."


class PaymentError(Exception):
    """A payment could not be started; the message is shown to the user."""


def format_rupiah(amount: int) -> str:
    """Format an amount the Indonesian way, e.g. ``Rp 7.500``."""
    return "Rp " + f"{amount:,}".replace(",", ".")


class GenerationController:
    """Drives the form → text → image → pay → download sequence.

    Args:
        text_generator: Text collaborator.
        image_generator: Image collaborator.
        gateway: Issues payment-session tokens.
        is_production: Forbids simulated payments when True.
        confirm: Simulated checkout dialog; ``None`` declines every simulation.
        widget: Real checkout widget, if one is available.
        paywall_step: ``"image"`` or ``"download"``.
        auto_chain_image: Continue into image generation after text when the
            image step is not paywalled.
        license_label: Item name used when the product has no name.
        license_amount: Price of one license in IDR.
        dialog_delay: Seconds to wait before the simulated dialog.
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        image_generator: ImageGenerator,
        gateway: SessionIssuer,
        *,
        is_production: bool = False,
        confirm: ConfirmCallback | None = None,
        widget: PaymentWidget | None = None,
        paywall_step: Literal["image", "download"] = "image",
        auto_chain_image: bool = False,
        license_label: str = "UMKM GenAI Poster License",
        license_amount: int = 7500,
        dialog_delay: float = 0.05,
    ) -> None:
        self._text = text_generator
        self._image = image_generator
        self._gateway = gateway
        self.is_production = is_production
        self.confirm = confirm
        self.widget = widget
        self.paywall_step = paywall_step
        self.auto_chain_image = auto_chain_image
        self.license_label = license_label
        self.license_amount = license_amount
        self.dialog_delay = dialog_delay

        self._state = WorkflowState()
        self._last_request: GenerationRequest | None = None

    @classmethod
    def from_config(
        cls,
        config: StudioConfig,
        *,
        confirm: ConfirmCallback | None = None,
        widget: PaymentWidget | None = None,
    ) -> GenerationController:
        """Build a controller wired to Gemini and the HTTP gateway."""
        service = GeminiContentService.from_config(config)
        return cls(
            service,
            service,
            GatewayClient.from_config(config),
            is_production=config.is_production,
            confirm=confirm,
            widget=widget,
            paywall_step=config.paywall_step,
            auto_chain_image=config.auto_chain_image,
            license_label=config.license_label,
            license_amount=config.license_amount,
            dialog_delay=config.simulated_dialog_delay,
        )

    # ------------------------------------------------------------------
    # State access.
    # ------------------------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def last_request(self) -> GenerationRequest | None:
        return self._last_request

    @property
    def image_requires_payment(self) -> bool:
        return self.paywall_step == "image"

    @property
    def download_requires_payment(self) -> bool:
        return self.paywall_step == "download"

    def _dispatch(self, event: Event) -> WorkflowState:
        self._state = reduce(self._state, event)
        return self._state

    def _product_label(self) -> str:
        if self._last_request and self._last_request.product_name.strip():
            return self._last_request.product_name.strip()
        return self.license_label

    # ------------------------------------------------------------------
    # Text generation.
    # ------------------------------------------------------------------

    async def submit_generation(self, request: GenerationRequest) -> WorkflowState:
        """Start a new generation cycle for ``request``.

        A request without product name or product image is rejected before
        any collaborator is contacted and leaves the state untouched.  If a
        newer submission starts while this one is waiting, this one's result
        is discarded.

        Args:
            request: The submitted form data.

        Returns:
            The state after this cycle settled (or was superseded).
        """
        if not request.can_submit():
            logger.warning("Rejected generation: product name and product image are required")
            return self._state

        self._last_request = request
        seq = self._dispatch(TextRequested()).generation_seq
        logger.info(f"Generation #{seq} started for '{request.product_name}'")

        try:
            content = await self._text.generate_content(request)
        except asyncio.CancelledError:
            self._dispatch(TextFailed(seq, "Generation was cancelled."))
            raise
        except Exception as e:
            logger.error(f"Generation #{seq} failed: {e}", exc_info=True)
            self._dispatch(TextFailed(seq, str(e) or "Something went wrong during generation."))
            return self._state

        state = self._dispatch(TextSucceeded(seq, content))
        if state.generation_seq != seq:
            logger.info(f"Generation #{seq} superseded by #{state.generation_seq}; result dropped")
            return state

        logger.info(f"Generation #{seq} ready")
        if self.auto_chain_image and not self.image_requires_payment:
            return await self.request_image(content.image_prompt, request.product_image)
        return state

    def edit_content(self, **changes: str) -> WorkflowState:
        """Apply user edits to the caption, hashtags or image prompt.

        Edits keep the paid flag; only a new generation resets it.
        """
        content = self._state.generated_content
        if content is None:
            return self._state
        try:
            updated = content.with_changes(**changes)
        except ValueError as e:
            return self._dispatch(ErrorRaised(str(e)))
        return self._dispatch(ContentEdited(self._state.generation_seq, updated))

    def clear_error(self) -> WorkflowState:
        return self._dispatch(ErrorCleared())

    # ------------------------------------------------------------------
    # Image generation.
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _image_flight(self, seq: int) -> AsyncIterator[int]:
        """Hold the image in-flight flag for the duration of the block."""
        image_seq = self._dispatch(ImageRequested(seq)).image_seq
        try:
            yield image_seq
        finally:
            self._dispatch(ImageReleased(image_seq))

    async def request_image(self, prompt: str, source_image: ImageBlob | None) -> WorkflowState:
        """Generate the poster image for the current artifact.

        Args:
            prompt: Image prompt; an empty prompt sets an error and makes no call.
            source_image: Optional product photo used as reference.

        Returns:
            The state after the call settled.
        """
        if not prompt or not prompt.strip():
            return self._dispatch(ErrorRaised("Image prompt is missing."))

        seq = self._state.generation_seq
        async with self._image_flight(seq) as image_seq:
            try:
                image = await self._image.generate_visual(prompt, source_image)
            except Exception as e:
                logger.error(f"Image generation failed: {e}", exc_info=True)
                message = f"Failed to generate image. Please try again. {e}".strip()
                self._dispatch(ImageFailed(seq, image_seq, message))
            else:
                self._dispatch(ImageSucceeded(seq, image_seq, image))
        return self._state

    async def generate_image(self) -> WorkflowState:
        """Generate the poster for the current content, paying first if required.

        The prompt and product photo are captured before payment so a slow
        checkout always generates the artifact it was started for.
        """
        content = self._state.generated_content
        prompt = content.image_prompt if content else ""
        if not prompt:
            return self._dispatch(
                ErrorRaised("No image prompt found to generate. Please regenerate text first.")
            )
        source = self._last_request.product_image if self._last_request else None

        if self.image_requires_payment and not await self.initiate_payment():
            return self._state

        return await self.request_image(prompt, source)

    async def download_artifact(self) -> ImageBlob | None:
        """Return the generated poster, paying first if required.

        Returns:
            The poster, or ``None`` if there is none or payment did not complete.
        """
        image = self._state.generated_image
        if image is None:
            self._dispatch(ErrorRaised("No generated image to download."))
            return None

        if self.download_requires_payment and not await self.initiate_payment():
            return None

        return image

    # ------------------------------------------------------------------
    # Payment.
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _payment_flight(self) -> AsyncIterator[None]:
        self._dispatch(PaymentStarted())
        try:
            yield
        finally:
            self._dispatch(PaymentReleased())

    async def initiate_payment(
        self, amount: int | None = None, product_label: str | None = None
    ) -> bool:
        """Make sure the current artifact is paid for.

        A checkout that completes after a newer generation replaced the
        artifact does not pay for the new one; it sets an error instead.

        Args:
            amount: Price in IDR; defaults to the license amount.
            product_label: Item name; defaults to the product name.

        Returns:
            True when the current artifact is paid for on return.
        """
        if self._state.has_paid_for_current_artifact:
            logger.info("Current artifact already paid; skipping checkout")
            return True
        if self._state.payment_in_flight:
            logger.warning("Payment already in progress; ignoring second request")
            return False

        amount = amount if amount and amount > 0 else self.license_amount
        label = product_label or self._product_label()
        seq = self._state.generation_seq

        async with self._payment_flight():
            try:
                paid = await self._checkout(label, amount)
            except Exception as e:
                logger.error(f"Payment Error: {e}", exc_info=True)
                reason = str(e) or "Unknown error"
                self._dispatch(ErrorRaised(f"Unable to initiate payment: {reason}"))
                return False
            if paid and not self._dispatch(PaymentSucceeded(seq)).has_paid_for_current_artifact:
                logger.warning(f"Payment for generation #{seq} arrived after a new generation")
                self._dispatch(ErrorRaised(STALE_PAYMENT_MESSAGE))

        return self._state.has_paid_for_current_artifact

    async def _checkout(self, label: str, amount: int) -> bool:
        """Run one checkout attempt and report whether it granted access.

        Raises:
            PaymentError: Configuration problems that must never be downgraded.
        """
        result = await self._gateway.create_session(label, amount)

        if isinstance(result, TokenError):
            raise PaymentError(result.message)

        if isinstance(result, MockToken):
            if self.is_production:
                raise PaymentError(
                    "Payment backend is returning MOCK token in production. "
                    "Please check the gateway and Midtrans configuration."
                )
            if self.dialog_delay > 0:
                await asyncio.sleep(self.dialog_delay)
            return await self._simulate_checkout(
                "[MIDTRANS PAYMENT SIMULATOR]\n\n"
                "Product: Commercial Use License\n"
                f"Item: {label}\n"
                f"Amount: {format_rupiah(amount)}\n\n"
                "Confirm to simulate successful payment."
            )

        if isinstance(result, RealToken):
            if self.widget is None:
                if self.is_production:
                    raise PaymentError("Midtrans Snap is not loaded in production.")
                return await self._simulate_checkout(
                    "[MIDTRANS PAYMENT SIMULATOR]\n\n"
                    "Snap widget not loaded, simulate successful payment instead?"
                )

            widget_result = await run_payment_widget(self.widget, result.session.token)
            logger.info(
                f"Snap {widget_result.outcome.value} for {label}: {widget_result.payload!r}"
            )
            if widget_result.outcome.grants_access:
                return True
            if widget_result.outcome is WidgetOutcome.ERROR:
                self._dispatch(ErrorRaised("Payment failed. Please try again."))
            return False

        raise TypeError(f"Unexpected session result: {result!r}")

    async def _simulate_checkout(self, message: str) -> bool:
        """Ask the user to confirm a simulated payment."""
        if self.confirm is None:
            logger.warning("No confirmation dialog available; simulated payment declined")
            return False
        try:
            confirmed = bool(await self.confirm(message))
        except Exception as e:
            logger.error(f"Payment confirmation dialog failed: {e}", exc_info=True)
            return False
        logger.info(f"Simulated payment {'confirmed' if confirmed else 'declined'}")
        return confirmed
