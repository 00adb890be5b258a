"""State management utilities for the UMKM Studio UI.

This module handles lazy initialization of per-session state: the
generation controller and the confirmation gate it uses for simulated
checkout.  It also owns the session's temporary download file.
"""

import logging
from pathlib import Path

from umkm_studio.core.config import config
from umkm_studio.core.controller import GenerationController

from .models import ConfirmationGate, UIState

logger = logging.getLogger(__name__)


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.is_initialized():
        return state

    logger.info("Initializing UIState components...")

    try:
        if state.gate is None:
            state.gate = ConfirmationGate()

        if state.controller is None:
            state.controller = GenerationController.from_config(config, confirm=state.gate.ask)
            logger.info(
                f"GenerationController ready ({config.mode_label}, "
                f"paywall on {config.paywall_step})"
            )

        return state

    except Exception as e:
        logger.error(f"Error initializing UIState: {e}", exc_info=True)
        raise


def discard_download(state: UIState) -> None:
    """Delete the session's previous download file, if any.

    Args:
        state: UI state

    Raises:
        OSError: If the file exists but cannot be removed
    """
    if state.last_download is None:
        return
    Path(state.last_download).unlink(missing_ok=True)
    logger.debug(f"Removed download file: {state.last_download}")
    state.last_download = None


def cleanup_ui_state(state: UIState | None) -> None:
    """Release session resources when Gradio drops the session state.

    An open confirmation is declined so a waiting payment can finish, and
    the temporary download file is removed.

    Args:
        state: UI state to clean up
    """
    if state is None:
        return

    logger.info("Cleaning up UIState resources")

    if state.gate is not None and state.gate.pending:
        state.gate.answer(False)

    try:
        discard_download(state)
    except OSError as e:
        logger.warning(f"Could not remove download file {state.last_download}: {e}")
        state.last_download = None

    state.controller = None
    state.gate = None
