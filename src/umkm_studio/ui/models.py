"""Data models for UMKM Studio UI state and constants."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from umkm_studio.core.models import CONTENT_TYPE_LABELS, DISPLAY_STYLE_LABELS, SEASONAL_THEMES

logger = logging.getLogger(__name__)


@dataclass
class ConfirmationGate:
    """A yes/no question the UI answers through Confirm/Cancel buttons.

    The controller awaits :meth:`ask`; the button handlers call
    :meth:`answer`.  At most one question is open at a time.
    """

    message: str = ""
    _future: asyncio.Future | None = field(default=None, repr=False)

    @property
    def pending(self) -> bool:
        """True while a question is waiting for an answer."""
        return self._future is not None and not self._future.done()

    async def ask(self, message: str) -> bool:
        """Open a question and wait for the answer.

        Args:
            message: Text shown next to the Confirm/Cancel buttons

        Returns:
            True if the user confirmed

        Raises:
            RuntimeError: If another question is still open
        """
        if self.pending:
            raise RuntimeError("Another confirmation is already pending")

        loop = asyncio.get_running_loop()
        self._future = loop.create_future()
        self.message = message
        try:
            return await self._future
        finally:
            self._future = None
            self.message = ""

    def answer(self, confirmed: bool) -> bool:
        """Settle the open question.

        Args:
            confirmed: The user's answer

        Returns:
            True if a question was open and is now settled
        """
        if not self.pending:
            logger.warning("Confirmation answered with no pending question")
            return False

        future = self._future
        future.get_loop().call_soon_threadsafe(_settle, future, confirmed)
        return True


def _settle(future: asyncio.Future, value: bool) -> None:
    if not future.done():
        future.set_result(value)


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own instance, so every user has an
    isolated controller and workflow.

    Attributes
    ----------
    controller : Any | None
        GenerationController for this session
    gate : ConfirmationGate | None
        Simulated-checkout confirmation shared by the controller and the
        Confirm/Cancel handlers
    last_download : str | None
        Temporary file holding the most recent download; removed on the
        next download and on session cleanup
    """

    controller: Any | None = None  # GenerationController instance
    gate: ConfirmationGate | None = None
    last_download: str | None = None

    def is_initialized(self) -> bool:
        """Check if the controller and confirmation gate are in place.

        Returns:
            True if the session is ready to handle events
        """
        return self.controller is not None and self.gate is not None

    def __repr__(self) -> str:
        """String representation for debugging."""
        phase = self.controller.state.phase.value if self.controller is not None else "-"
        return f"UIState(initialized={self.is_initialized()}, phase={phase})"


# Dropdown choices as (label, value) pairs
DISPLAY_STYLE_CHOICES = [(label, style.value) for style, label in DISPLAY_STYLE_LABELS]
CONTENT_TYPE_CHOICES = [(label, kind.value) for kind, label in CONTENT_TYPE_LABELS]
SEASONAL_THEME_CHOICES = [(label, value) for value, label in SEASONAL_THEMES]

DEFAULT_DISPLAY_STYLE = DISPLAY_STYLE_CHOICES[0][1]
DEFAULT_CONTENT_TYPE = CONTENT_TYPE_CHOICES[0][1]

# Seconds between checks for an open confirmation while a payment runs
CONFIRM_POLL_INTERVAL = 0.1
