"""Workflow state and its pure transition function.

The controller owns exactly one :class:`WorkflowState`.  It never mutates
it: every change is an event passed through :func:`reduce`, which returns a
new state.  This keeps each async completion a single whole-state
transition computed from the latest snapshot.

Sequencing
----------
Two counters make stale results harmless:

- ``generation_seq`` identifies the current artifact.  It is bumped by
  :class:`TextRequested`.  Text completions, image completions and paid
  marks all carry the ``generation_seq`` they were started under and are
  dropped when it no longer matches.
- ``image_seq`` identifies the latest image request within an artifact so
  a slower, older image call cannot overwrite a newer one.

Phases
------
``Idle → TextGenerating → {TextReady, TextFailed}``; from ``TextReady``
optionally ``→ ImageGenerating → {ImageReady, ImageFailed}``.  Orthogonally
``Unpaid → PaymentPending → {Paid, Unpaid}``.  Paid resets to Unpaid on
every new :class:`TextRequested`, never on :class:`ContentEdited`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .models import GeneratedContent, ImageBlob

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "Idle"
    TEXT_GENERATING = "TextGenerating"
    TEXT_READY = "TextReady"
    TEXT_FAILED = "TextFailed"
    IMAGE_GENERATING = "ImageGenerating"
    IMAGE_READY = "ImageReady"
    IMAGE_FAILED = "ImageFailed"


class PaymentPhase(str, Enum):
    UNPAID = "Unpaid"
    PAYMENT_PENDING = "PaymentPending"
    PAID = "Paid"


@dataclass(frozen=True)
class WorkflowState:
    """Snapshot of one UI session's generation workflow."""

    text_generation_in_flight: bool = False
    image_generation_in_flight: bool = False
    payment_in_flight: bool = False
    has_paid_for_current_artifact: bool = False
    last_error: str | None = None
    generated_content: GeneratedContent | None = None
    generated_image: ImageBlob | None = None
    generation_seq: int = 0
    image_seq: int = 0
    image_failed: bool = False

    @property
    def phase(self) -> Phase:
        if self.text_generation_in_flight:
            return Phase.TEXT_GENERATING
        if self.generated_content is None:
            return Phase.TEXT_FAILED if self.generation_seq and self.last_error else Phase.IDLE
        if self.image_generation_in_flight:
            return Phase.IMAGE_GENERATING
        if self.generated_image is not None:
            return Phase.IMAGE_READY
        if self.image_failed:
            return Phase.IMAGE_FAILED
        return Phase.TEXT_READY

    @property
    def payment_phase(self) -> PaymentPhase:
        if self.payment_in_flight:
            return PaymentPhase.PAYMENT_PENDING
        if self.has_paid_for_current_artifact:
            return PaymentPhase.PAID
        return PaymentPhase.UNPAID

    @property
    def busy(self) -> bool:
        """True while any collaborator call or payment is outstanding."""
        return (
            self.text_generation_in_flight
            or self.image_generation_in_flight
            or self.payment_in_flight
        )


# ---------------------------------------------------------------------------
# Events.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextRequested:
    """A new generation cycle starts; the artifact is replaced."""


@dataclass(frozen=True)
class TextSucceeded:
    seq: int
    content: GeneratedContent


@dataclass(frozen=True)
class TextFailed:
    seq: int
    message: str


@dataclass(frozen=True)
class ImageRequested:
    seq: int


@dataclass(frozen=True)
class ImageSucceeded:
    seq: int
    image_seq: int
    image: ImageBlob


@dataclass(frozen=True)
class ImageFailed:
    seq: int
    image_seq: int
    message: str


@dataclass(frozen=True)
class ImageReleased:
    """Clears the image in-flight flag if ``image_seq`` is still the latest."""

    image_seq: int


@dataclass(frozen=True)
class PaymentStarted:
    pass


@dataclass(frozen=True)
class PaymentSucceeded:
    """Marks the artifact identified by ``seq`` as paid."""

    seq: int


@dataclass(frozen=True)
class PaymentReleased:
    pass


@dataclass(frozen=True)
class ContentEdited:
    seq: int
    content: GeneratedContent


@dataclass(frozen=True)
class ErrorRaised:
    message: str


@dataclass(frozen=True)
class ErrorCleared:
    pass


Event = (
    TextRequested
    | TextSucceeded
    | TextFailed
    | ImageRequested
    | ImageSucceeded
    | ImageFailed
    | ImageReleased
    | PaymentStarted
    | PaymentSucceeded
    | PaymentReleased
    | ContentEdited
    | ErrorRaised
    | ErrorCleared
)


def _stale(state: WorkflowState, event: Event) -> WorkflowState:
    logger.debug(f"Discarding stale {type(event).__name__} (current seq={state.generation_seq})")
    return state


def reduce(state: WorkflowState, event: Event) -> WorkflowState:
    """Apply one event to a state and return the next state.

    Args:
        state: Current snapshot
        event: Event to apply

    Returns:
        The next snapshot (``state`` itself when the event is stale)

    Raises:
        TypeError: For an unknown event type
    """
    if isinstance(event, TextRequested):
        return WorkflowState(
            text_generation_in_flight=True,
            # An outstanding payment keeps its flag until its own release.
            payment_in_flight=state.payment_in_flight,
            generation_seq=state.generation_seq + 1,
            image_seq=state.image_seq,
        )

    if isinstance(event, TextSucceeded):
        if event.seq != state.generation_seq:
            return _stale(state, event)
        return replace(
            state,
            text_generation_in_flight=False,
            generated_content=event.content,
            last_error=None,
        )

    if isinstance(event, TextFailed):
        if event.seq != state.generation_seq:
            return _stale(state, event)
        return replace(
            state,
            text_generation_in_flight=False,
            image_generation_in_flight=False,
            payment_in_flight=False,
            last_error=event.message,
        )

    if isinstance(event, ImageRequested):
        if event.seq != state.generation_seq:
            return _stale(state, event)
        return replace(
            state,
            image_generation_in_flight=True,
            image_seq=state.image_seq + 1,
            image_failed=False,
            last_error=None,
        )

    if isinstance(event, ImageSucceeded):
        if event.seq != state.generation_seq or event.image_seq != state.image_seq:
            return _stale(state, event)
        return replace(
            state,
            image_generation_in_flight=False,
            generated_image=event.image,
            image_failed=False,
        )

    if isinstance(event, ImageFailed):
        if event.seq != state.generation_seq or event.image_seq != state.image_seq:
            return _stale(state, event)
        return replace(
            state,
            image_generation_in_flight=False,
            image_failed=True,
            last_error=event.message,
        )

    if isinstance(event, ImageReleased):
        if event.image_seq != state.image_seq or not state.image_generation_in_flight:
            return state
        return replace(state, image_generation_in_flight=False)

    if isinstance(event, PaymentStarted):
        return replace(state, payment_in_flight=True, last_error=None)

    if isinstance(event, PaymentSucceeded):
        if event.seq != state.generation_seq:
            return _stale(state, event)
        return replace(state, has_paid_for_current_artifact=True, payment_in_flight=False)

    if isinstance(event, PaymentReleased):
        return replace(state, payment_in_flight=False)

    if isinstance(event, ContentEdited):
        if event.seq != state.generation_seq or state.generated_content is None:
            return _stale(state, event)
        return replace(state, generated_content=event.content)

    if isinstance(event, ErrorRaised):
        return replace(state, last_error=event.message)

    if isinstance(event, ErrorCleared):
        return replace(state, last_error=None)

    raise TypeError(f"Unknown workflow event: {event!r}")
