"""HTTP mapping for the storefront error taxonomy."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from storefront.errors import (
    EmptyCart,
    Forbidden,
    InvalidQuantity,
    InvalidStatus,
    NotFound,
    OutOfStock,
    StorageFailure,
)

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    NotFound: 404,
    Forbidden: 403,
    OutOfStock: 409,
    InvalidQuantity: 422,
    EmptyCart: 422,
    InvalidStatus: 422,
}

GENERIC_FAILURE_MESSAGE = "Something went wrong while saving your changes. Please try again."


def _error_body(exc, messages):
    return {"error": type(exc).__name__, "messages": messages}


async def _handle_storefront_error(request: Request, exc):
    return JSONResponse(
        status_code=STATUS_CODES[type(exc)],
        content=_error_body(exc, exc.messages),
    )


async def _handle_storage_failure(request: Request, exc: StorageFailure):
    logger.error(
        "Storage failure",
        path=request.url.path,
        method=request.method,
        messages=exc.messages,
        cause=repr(exc.__cause__) if exc.__cause__ else None,
    )
    return JSONResponse(
        status_code=503,
        content=_error_body(exc, {"_entity": [GENERIC_FAILURE_MESSAGE]}),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install Protean's default handlers, then the storefront-specific ones."""
    register_protean_handlers(app)
    for exc_class in STATUS_CODES:
        app.add_exception_handler(exc_class, _handle_storefront_error)
    app.add_exception_handler(StorageFailure, _handle_storage_failure)
