"""UMKM GenAI Studio - Transaction Gateway.

A small FastAPI service that issues Midtrans Snap payment-session tokens
for the poster license.  The studio UI calls it through
:class:`~umkm_studio.core.payment.GatewayClient`.

Endpoints
---------
========  ========================  ======================================
Method    Path                      Purpose
========  ========================  ======================================
POST      ``/create-transaction``   Create a Snap session, return its token
GET       ``/health``               Liveness plus the active mode
========  ========================  ======================================

Usage
-----
CLI (installed entry point)::

    umkm-gateway

Direct invocation::

    python -m umkm_studio.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from umkm_studio import __version__
from umkm_studio.api.gateway import TransactionGateway
from umkm_studio.api.models import TransactionRequest, TransactionResponse
from umkm_studio.core.config import config
from umkm_studio.core.errors import GatewayConfigurationError, GatewayUpstreamError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the :class:`TransactionGateway` and store it on ``app.state``.

    Tests may pre-populate ``app.state.gateway``; an existing gateway is
    left in place.
    """
    if getattr(app.state, "gateway", None) is None:
        app.state.gateway = TransactionGateway.from_config(config)
    logger.info(f"Transaction gateway ready ({config.mode_label})")

    yield


app = FastAPI(
    title="UMKM GenAI Studio Gateway",
    description="Issues Midtrans Snap payment sessions for poster licenses.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/create-transaction", response_model=TransactionResponse)
async def create_transaction(req: TransactionRequest, request: Request) -> TransactionResponse:
    """Create a payment session for one poster license.

    Args:
        req: Validated request body (``productName`` and ``amount``, both
            optional).
        request: The incoming request, used to reach ``app.state``.

    Returns:
        The session token.  Outside production this may be
        ``MOCK_TOKEN_DEMO``.

    Raises:
        HTTPException: 500 when production has no server key, 502 when
            Midtrans fails in production.
    """
    gateway: TransactionGateway = request.app.state.gateway
    try:
        token = await run_in_threadpool(gateway.create_session, req.product_name, req.amount)
    except GatewayConfigurationError as e:
        logger.error(f"Gateway misconfigured: {e}")
        raise HTTPException(status_code=500, detail="Midtrans server key is not configured")
    except GatewayUpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return TransactionResponse(token=token)


@app.get("/health")
async def health(request: Request) -> dict:
    """Report liveness and whether the gateway runs against production."""
    gateway: TransactionGateway = request.app.state.gateway
    return {
        "ok": True,
        "production": gateway.is_production,
        "mode": "PRODUCTION" if gateway.is_production else "SANDBOX",
    }


def main() -> None:
    """Launch the uvicorn ASGI server.

    Host and port come from ``UMKM_SERVER_HOST`` and ``UMKM_SERVER_PORT``
    (default ``0.0.0.0:4000``).
    """
    import uvicorn

    uvicorn.run(
        "umkm_studio.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
