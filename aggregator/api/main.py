"""FastAPI application for the swap aggregator.

Note: Authentication is not implemented here. The caller field of admin and
swap requests is trusted as-is and must be bound to a real identity by the
infrastructure in front of the service.
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aggregator import __version__
from aggregator.api.endpoints import router
from aggregator.config import AggregatorConfig
from aggregator.errors import (
    AggregatorError,
    ApprovalFailed,
    DeadlineExpired,
    ExternalCallFailed,
    InvalidArgument,
    SlippageExceeded,
    TransferFailed,
    Unauthorized,
)
from aggregator.log_config import configure_logging

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# Most specific first; AggregatorError is the fallback
ERROR_STATUS: list[tuple[type[AggregatorError], int]] = [
    (InvalidArgument, 400),
    (Unauthorized, 403),
    (TransferFailed, 409),
    (ApprovalFailed, 409),
    (SlippageExceeded, 409),
    (DeadlineExpired, 409),
    (ExternalCallFailed, 502),
    (AggregatorError, 500),
]

app = FastAPI(
    title="Swap Aggregator",
    description="Best-price quoting and slippage-protected execution across AMM venues",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AggregatorError)
async def aggregator_error_handler(_request: Request, exc: AggregatorError) -> JSONResponse:
    """Map the aggregator error taxonomy to HTTP status codes."""
    status = next(code for cls, code in ERROR_STATUS if isinstance(exc, cls))
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the aggregator API server.

    Configuration via AGGREGATOR_* environment variables, see
    AggregatorConfig.from_env (HOST, PORT, DEBUG, LOG_LEVEL, RPC_URL, ...).
    """
    config = AggregatorConfig.from_env()
    configure_logging(config.log_level)
    uvicorn.run(
        "aggregator.api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    run()
