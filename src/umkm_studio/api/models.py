"""Pydantic request and response models for the transaction gateway.

Models
------
TransactionRequest
    Payload for ``POST /create-transaction`` - the product label and amount
    to charge.  Both are optional; the gateway substitutes defaults.
TransactionResponse
    Reply for ``POST /create-transaction`` - the opaque session token.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TransactionRequest(BaseModel):
    """Request body for the ``POST /create-transaction`` endpoint.

    The wire format uses camelCase (``productName``) to match the browser
    client; snake_case is accepted as well.

    Attributes:
        product_name: Item name shown at checkout.  Empty or missing means
            the default license label.
        amount: Price in IDR.  Missing, unparseable or non-positive means the
            default price point.
    """

    model_config = ConfigDict(populate_by_name=True)

    product_name: str | None = Field(
        default=None,
        alias="productName",
        description="Item name shown at checkout (default: license label).",
    )
    amount: float | str | None = Field(
        default=None,
        description="Price in IDR; unparseable values mean the default price point.",
    )


class TransactionResponse(BaseModel):
    """Response body for the ``POST /create-transaction`` endpoint.

    Attributes:
        token: Snap session token, or ``MOCK_TOKEN_DEMO`` in simulated mode.
    """

    token: str = Field(..., description="Opaque payment-session token.")
