"""Payment, confirmation and download handlers."""

import asyncio
import logging
import tempfile
from collections.abc import AsyncIterator, Awaitable
from typing import Any

import gradio as gr

from umkm_studio.core.config import config
from umkm_studio.core.models import ImageBlob

from ..formatting import format_error, format_status
from ..models import CONFIRM_POLL_INTERVAL, UIState
from ..state import discard_download, initialize_ui_state
from ..validation import sanitize_filename_input

logger = logging.getLogger(__name__)


async def run_with_confirmation(
    state: UIState, operation: Awaitable[Any]
) -> AsyncIterator[tuple[bool, Any]]:
    """Run a controller call while surfacing confirmation requests.

    Yields ``(False, message)`` each time the session's confirmation gate
    opens a question, and finally ``(True, result)`` with the call's result.
    The call is cancelled if the consumer stops early.

    Args:
        state: Initialized UI state
        operation: Controller coroutine to run

    Yields:
        Tuples of (finished, message_or_result)
    """
    task = asyncio.ensure_future(operation)
    shown = False
    try:
        while not task.done():
            if state.gate.pending and not shown:
                shown = True
                yield False, state.gate.message
            elif not state.gate.pending:
                shown = False
            await asyncio.wait({task}, timeout=CONFIRM_POLL_INTERVAL)
        yield True, task.result()
    finally:
        if not task.done():
            task.cancel()


def _show_confirmation(message: str) -> tuple[dict, dict]:
    return gr.update(visible=True), gr.update(value=message)


def _hide_confirmation() -> tuple[dict, dict]:
    return gr.update(visible=False), gr.update(value="")


def confirm_payment(state: UIState) -> tuple[dict, UIState]:
    """Confirm the open simulated payment.

    Args:
        state: UI state

    Returns:
        Tuple of (confirmation_group_update, state)
    """
    state = initialize_ui_state(state)
    state.gate.answer(True)
    return gr.update(visible=False), state


def decline_payment(state: UIState) -> tuple[dict, UIState]:
    """Decline the open simulated payment.

    Args:
        state: UI state

    Returns:
        Tuple of (confirmation_group_update, state)
    """
    state = initialize_ui_state(state)
    state.gate.answer(False)
    return gr.update(visible=False), state


def _write_download(image: ImageBlob, product_name: str) -> str:
    """Write the poster to a fresh temporary file and return its path."""
    name = sanitize_filename_input(product_name)
    with tempfile.NamedTemporaryFile(
        prefix=f"poster-{name}-",
        suffix=f".{image.extension}",
        dir=config.download_dir,
        delete=False,
    ) as f:
        f.write(image.data)
    return f.name


async def download_poster(state: UIState):
    """Write the poster to a temporary file and offer it for download.

    Every download gets its own file, so sessions never share a path.  The
    session's previous file is removed first.  If downloads are behind the
    paywall, payment runs first and the confirmation group is shown while a
    simulated checkout waits.

    Args:
        state: UI state

    Yields:
        Tuples of (status, download_file, confirmation_group, confirmation_message, state)
    """
    state = initialize_ui_state(state)
    controller = state.controller
    controller.clear_error()

    try:
        async for finished, value in run_with_confirmation(state, controller.download_artifact()):
            if not finished:
                status = format_status(controller.state)
                yield (status, gr.update(), *_show_confirmation(value), state)
                continue

            if value is None:
                yield (
                    format_status(controller.state, controller.license_amount),
                    gr.update(value=None, visible=False),
                    *_hide_confirmation(),
                    state,
                )
                return

            discard_download(state)
            path = _write_download(value, controller.last_request.product_name)
            state.last_download = path
            logger.info(f"Poster saved for download: {path}")

            yield (
                format_status(controller.state),
                gr.update(value=path, visible=True),
                *_hide_confirmation(),
                state,
            )

    except OSError as e:
        logger.error(f"Error saving poster: {e}", exc_info=True)
        yield (
            format_error(f"Could not save the poster: {e}"),
            gr.update(value=None, visible=False),
            *_hide_confirmation(),
            state,
        )
