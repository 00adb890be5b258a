"""Client side of the payment flow.

This module holds everything the controller needs to turn "the user wants
to pay" into a settled outcome, without knowing how the payment provider
works:

- :data:`MOCK_TOKEN` - the sentinel token signalling simulated checkout.
- :class:`RealToken` / :class:`MockToken` / :class:`TokenError` - the tagged
  result of asking the gateway for a session.  The controller branches on
  the type, never on string comparison.
- :class:`GatewayClient` - ``POST /create-transaction`` over ``httpx``.
- :class:`PaymentWidget` - the checkout widget contract
  ``pay(token, callbacks)``, and :func:`run_payment_widget`, which folds the
  four mutually exclusive callbacks into one awaited :class:`WidgetResult`.

Fallback Rules
--------------
==========================  ====================  ==================
Condition                   Non-production        Production
==========================  ====================  ==================
No gateway URL configured   ``MockToken`` + warn  ``TokenError``
Malformed gateway URL       ``MockToken`` + log   ``TokenError``
Gateway request fails       ``MockToken`` + log   ``TokenError``
Gateway returns sentinel    ``MockToken``         ``MockToken`` [1]_
==========================  ====================  ==================

.. [1] The controller treats a mock token in production as fatal.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol, runtime_checkable

import httpx

from .config import StudioConfig
from .models import PaymentSession

logger = logging.getLogger(__name__)

MOCK_TOKEN = "MOCK_TOKEN_DEMO"


# ---------------------------------------------------------------------------
# Tagged session result.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RealToken:
    session: PaymentSession


@dataclass(frozen=True)
class MockToken:
    session: PaymentSession


@dataclass(frozen=True)
class TokenError:
    message: str


TokenResult = RealToken | MockToken | TokenError


def classify_token(token: str, product_label: str, amount: int) -> RealToken | MockToken:
    """Wrap a token string in the matching tagged result."""
    session = PaymentSession(token=token, product_label=product_label, amount=amount)
    if token == MOCK_TOKEN:
        return MockToken(session)
    return RealToken(session)


# ---------------------------------------------------------------------------
# Gateway client.
# ---------------------------------------------------------------------------


class GatewayClient:
    """Requests payment-session tokens from the transaction gateway.

    Args:
        base_url: Gateway base URL; ``None`` or empty means "not configured".
        is_production: Whether mock fallbacks are forbidden.
        timeout: Request timeout in seconds.
        transport: Optional custom transport (useful for testing).
    """

    def __init__(
        self,
        base_url: str | None,
        *,
        is_production: bool = False,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/") or None
        self.is_production = is_production
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: StudioConfig) -> GatewayClient:
        return cls(
            config.gateway_url,
            is_production=config.is_production,
            timeout=config.gateway_timeout,
        )

    def _fallback(self, product_label: str, amount: int, reason: str) -> MockToken | TokenError:
        if self.is_production:
            return TokenError(reason)
        return classify_token(MOCK_TOKEN, product_label, amount)

    async def create_session(self, product_label: str, amount: int) -> TokenResult:
        """Ask the gateway for a payment-session token.

        Never raises for gateway problems: they come back as ``MockToken``
        outside production and ``TokenError`` in production.

        Args:
            product_label: Item name shown at checkout.
            amount: Price in IDR.

        Returns:
            The tagged session result.
        """
        logger.info(f"Initiating payment for: {product_label} ({amount})")

        if not self.base_url:
            if self.is_production:
                logger.error("Gateway URL is not configured in production")
                return TokenError("Payment gateway URL is not configured.")
            logger.warning(
                "Gateway URL is not defined. Falling back to mock token for payment simulation."
            )
            return classify_token(MOCK_TOKEN, product_label, amount)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    "/create-transaction",
                    json={"productName": product_label, "amount": amount},
                )
            if not response.is_success:
                raise ValueError(f"Request failed with status {response.status_code}")
            data = response.json()
            token = data.get("token") if isinstance(data, dict) else None
            if not isinstance(token, str) or not token:
                raise ValueError("Invalid token response from backend")
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error(f"Error fetching payment token: {e}")
            return self._fallback(product_label, amount, f"Payment gateway error: {e}")

        return classify_token(token, product_label, amount)


# ---------------------------------------------------------------------------
# Payment widget bridge.
# ---------------------------------------------------------------------------


class WidgetOutcome(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"
    ERROR = "error"
    CLOSED = "closed"

    @property
    def grants_access(self) -> bool:
        """Success and pending both unlock the artifact."""
        return self in (WidgetOutcome.SUCCESS, WidgetOutcome.PENDING)


@dataclass(frozen=True)
class WidgetResult:
    outcome: WidgetOutcome
    payload: Any = None


@dataclass(frozen=True)
class PaymentCallbacks:
    """The four widget callbacks; exactly one is expected to fire."""

    on_success: Callable[[Any], None]
    on_pending: Callable[[Any], None]
    on_error: Callable[[Any], None]
    on_close: Callable[[], None] = field(default=lambda: None)


@runtime_checkable
class PaymentWidget(Protocol):
    """A checkout widget that consumes a session token."""

    def pay(self, token: str, callbacks: PaymentCallbacks) -> None: ...


async def run_payment_widget(widget: PaymentWidget, token: str) -> WidgetResult:
    """Open the widget and wait for its single outcome.

    The first callback to fire settles the result.  Any later callback is
    ignored with a warning.  An exception raised by ``widget.pay`` itself
    propagates to the caller.

    Args:
        widget: The checkout widget.
        token: Session token from the gateway.

    Returns:
        The settled :class:`WidgetResult`.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[WidgetResult] = loop.create_future()

    def settle(outcome: WidgetOutcome, payload: Any = None) -> None:
        def _apply() -> None:
            if future.done():
                logger.warning(f"Ignoring extra payment widget callback: {outcome.value}")
                return
            logger.info(f"Payment {outcome.value}")
            future.set_result(WidgetResult(outcome, payload))

        # Widgets may call back from another thread.
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            _apply()
        else:
            loop.call_soon_threadsafe(_apply)

    callbacks = PaymentCallbacks(
        on_success=lambda result=None: settle(WidgetOutcome.SUCCESS, result),
        on_pending=lambda result=None: settle(WidgetOutcome.PENDING, result),
        on_error=lambda result=None: settle(WidgetOutcome.ERROR, result),
        on_close=lambda: settle(WidgetOutcome.CLOSED),
    )
    widget.pay(token, callbacks)
    return await future
