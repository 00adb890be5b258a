"""Midtrans Snap session issuance for the transaction gateway.

:class:`TransactionGateway` turns a ``(product_label, amount)`` pair into a
Snap token.  It owns the environment-gated fallback rules:

=============================  ======================  ==============================
Condition                      Sandbox                 Production
=============================  ======================  ==============================
Server key missing             ``MOCK_TOKEN_DEMO``     :class:`GatewayConfigurationError`
Midtrans call fails            ``MOCK_TOKEN_DEMO``     :class:`GatewayUpstreamError`
=============================  ======================  ==============================

The server key is resolved by
:meth:`~umkm_studio.core.config.StudioConfig.resolve_server_key`, so the
mode-specific variables win over the shared ``UMKM_MIDTRANS_SERVER_KEY``.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import midtransclient

from umkm_studio.core.config import StudioConfig
from umkm_studio.core.errors import GatewayConfigurationError, GatewayUpstreamError
from umkm_studio.core.payment import MOCK_TOKEN

logger = logging.getLogger(__name__)

ITEM_ID = "poster-license"


class TransactionGateway:
    """Issues payment-session tokens through Midtrans Snap.

    Attributes:
        is_production: Whether Snap runs against the production environment.
        default_label: Item name used when the request has none.
        default_amount: Price used when the request has none (or a bad one).
    """

    def __init__(
        self,
        server_key: str | None,
        *,
        is_production: bool = False,
        client_key: str | None = None,
        default_label: str = "UMKM GenAI Poster License",
        default_amount: int = 7500,
        snap: Any | None = None,
    ) -> None:
        self._server_key = server_key
        self._client_key = client_key
        self._snap = snap
        self.is_production = is_production
        self.default_label = default_label
        self.default_amount = default_amount

        if not self.configured:
            logger.warning(
                "[Midtrans] Server key is not set. Set one of UMKM_MIDTRANS_SERVER_KEY_SANDBOX, "
                "UMKM_MIDTRANS_SERVER_KEY_PRODUCTION, or UMKM_MIDTRANS_SERVER_KEY"
            )
        logger.info(f"[Midtrans] Mode: {'PRODUCTION' if is_production else 'SANDBOX'}")

    @classmethod
    def from_config(cls, config: StudioConfig) -> TransactionGateway:
        return cls(
            config.resolve_server_key(),
            is_production=config.is_production,
            client_key=config.midtrans_client_key,
            default_label=config.license_label,
            default_amount=config.license_amount,
        )

    @property
    def configured(self) -> bool:
        """True when Midtrans credentials are available (or a client was injected)."""
        return self._snap is not None or bool(self._server_key)

    def _get_snap(self):
        if self._snap is None:
            self._snap = midtransclient.Snap(
                is_production=self.is_production,
                server_key=self._server_key,
                client_key=self._client_key or "",
            )
        return self._snap

    def normalize(self, product_label: str | None, amount: Any) -> tuple[str, int]:
        """Apply the default label and amount.

        Args:
            product_label: Requested item name.
            amount: Requested price; anything non-numeric or non-positive
                falls back to the default.

        Returns:
            Tuple of ``(label, amount)``.
        """
        label = (product_label or "").strip() or self.default_label
        try:
            value = int(round(float(amount)))
        except (TypeError, ValueError, OverflowError):
            value = 0
        return label, value if value > 0 else self.default_amount

    @staticmethod
    def build_transaction(label: str, amount: int) -> dict:
        """Build the Snap transaction parameters for one poster license."""
        order_id = f"ORDER-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
        return {
            "transaction_details": {
                "order_id": order_id,
                "gross_amount": amount,
            },
            "item_details": [
                {
                    "id": ITEM_ID,
                    "price": amount,
                    "quantity": 1,
                    "name": label,
                }
            ],
        }

    def create_session(self, product_label: str | None, amount: Any) -> str:
        """Create a Snap transaction and return its token.

        This call blocks on the Midtrans HTTP request; run it in a worker
        thread from async code.

        Args:
            product_label: Item name (default applied when empty).
            amount: Price in IDR (default applied when absent or non-positive).

        Returns:
            The Snap token, or :data:`MOCK_TOKEN` in sandbox fallbacks.

        Raises:
            GatewayConfigurationError: No server key in production.
            GatewayUpstreamError: Midtrans failed in production.
        """
        label, value = self.normalize(product_label, amount)

        if not self.configured:
            if self.is_production:
                raise GatewayConfigurationError("Midtrans server key is not configured")
            logger.warning("[Midtrans] No server key; returning mock token")
            return MOCK_TOKEN

        params = self.build_transaction(label, value)
        order_id = params["transaction_details"]["order_id"]
        try:
            transaction = self._get_snap().create_transaction(params)
            token = transaction.get("token") if isinstance(transaction, dict) else None
            if not token:
                raise ValueError("Snap response did not include a token")
        except Exception as e:
            logger.error(f"Midtrans error for {order_id}: {e}", exc_info=True)
            if self.is_production:
                raise GatewayUpstreamError("Failed to create transaction") from e
            logger.warning("[Midtrans] Falling back to mock token in sandbox")
            return MOCK_TOKEN

        logger.info(f"Created Snap transaction {order_id} ({value})")
        return token
