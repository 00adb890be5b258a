"""UMKM GenAI Studio - transaction gateway (FastAPI).

Modules
-------
main
    FastAPI application with the ``/create-transaction`` and ``/health``
    routes and the ``main()`` CLI entry point.
models
    Pydantic models for request and response validation.
gateway
    Midtrans Snap session issuance with the sandbox mock fallback.
"""
