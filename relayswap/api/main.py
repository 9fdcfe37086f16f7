"""FastAPI application for the relay quote service.

Note: Rate limiting is not implemented at the application level. It
belongs to the reverse proxy in front of the service.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from relayswap.api.endpoints import close_service, router
from relayswap.errors import (
    ConcentrationGuardError,
    InsufficientLiquidityError,
    InvalidInputError,
    NoRouteError,
    RelaySwapError,
    UnavailableDataError,
)

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("RELAYSWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("RELAYSWAP_PORT", "8000"))
DEBUG = os.environ.get("RELAYSWAP_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# Checked in order; subclasses before their bases
ERROR_STATUS: list[tuple[type[RelaySwapError], int]] = [
    (InvalidInputError, 422),
    (InsufficientLiquidityError, 409),
    (ConcentrationGuardError, 409),
    (NoRouteError, 404),
    (UnavailableDataError, 503),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await close_service()


app = FastAPI(
    title="RelaySwap",
    description="Quotes, routes and sizes liquidity across bonding-curve relays",
    version="0.1.0",
    lifespan=lifespan,
)


def error_status(err: RelaySwapError) -> int:
    """HTTP status for a relay pricing error; 500 for configuration defects."""
    for error_type, status in ERROR_STATUS:
        if isinstance(err, error_type):
            return status
    return 500


@app.exception_handler(RelaySwapError)
async def relayswap_error_handler(request: Request, err: RelaySwapError) -> JSONResponse:
    status = error_status(err)
    log = logger.error if status >= 500 else logger.info
    log(
        "request_rejected",
        path=request.url.path,
        error_type=type(err).__name__,
        status=status,
        error=str(err),
    )
    return JSONResponse(
        status_code=status,
        content={"detail": str(err), "error": type(err).__name__},
    )


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the quote API server.

    Configuration via environment variables:
    - RELAYSWAP_HOST: Host to bind to (default: 0.0.0.0)
    - RELAYSWAP_PORT: Port to bind to (default: 8000)
    - RELAYSWAP_DEBUG: Enable debug/reload mode (default: false)
    - RELAYSWAP_SNAPSHOT_PATH: Market snapshot JSON served by the API
    - RELAYSWAP_RPC_URL: Ledger node the /live routes hydrate relays from
    """
    uvicorn.run(
        "relayswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
