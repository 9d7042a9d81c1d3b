"""Custom exceptions and centralized FastAPI error handlers."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SneakerProxyError(Exception):
    """Base exception with HTTP status code and extra JSON body fields."""

    def __init__(self, message: str, status_code: int = 500, **extra: Any):
        super().__init__(message)
        self.status_code = status_code
        self.extra = extra


class ClientInputError(SneakerProxyError):
    def __init__(self, param: str):
        super().__init__(f"The '{param}' parameter is required", status_code=400)


class ProductNotFoundError(SneakerProxyError):
    def __init__(self, **extra: Any):
        super().__init__("Product not found", status_code=404, **extra)


class UpstreamError(Exception):
    """Raised by the product source when a marketplace call fails."""


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(SneakerProxyError)
    async def handle_proxy_error(_request: Request, exc: SneakerProxyError):
        return JSONResponse({"error": str(exc), **exc.extra}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)
