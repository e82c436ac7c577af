"""Doorstep FastAPI application.

Checkout submission, quotes and order administration over HTTP. Commands are
processed synchronously; every request runs inside the commerce domain
context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from commerce import settings
from commerce.api.errors import register_exception_handlers
from commerce.api.routes import order_router
from commerce.domain import commerce
from commerce.utils.logging import add_context, clear_context, configure_logging

# PROTEAN_ENV selects the config overlay applied at init
configure_logging()
commerce.init()

app = FastAPI(
    title="Doorstep API",
    description="Cart pricing, checkout and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the commerce domain context and tag log lines with a request id."""
    add_context(request_id=request.headers.get("x-request-id") or str(uuid4()))
    try:
        with commerce.domain_context():
            return await call_next(request)
    finally:
        clear_context()


app.include_router(order_router)
register_exception_handlers(app)


@app.get("/health")
async def health():
    tier = settings.delivery_tier()
    return JSONResponse(
        content={
            "status": "ok",
            "domain": commerce.name,
            "delivery": {
                "free_delivery_threshold": tier.free_delivery_threshold,
                "standard_delivery_charge": tier.standard_delivery_charge,
            },
        }
    )
