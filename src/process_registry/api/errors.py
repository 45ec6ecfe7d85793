"""
process_registry.api.errors

Global exception handlers.

Responsibilities:
- Map every `RegistryError` to its HTTP status with a uniform JSON envelope.
- Log configuration failures loudly; everything else is an expected client outcome.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_401_UNAUTHORIZED

from process_registry.errors import ConfigError, RegistryError
from process_registry.observability.logging import get_logger

log = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
        if isinstance(exc, ConfigError):
            log.error("config_error", error=exc.message, path=request.url.path)
        else:
            log.info("request_failed", code=exc.code, status=exc.http_status)

        headers = {"WWW-Authenticate": "Bearer"} if exc.http_status == HTTP_401_UNAUTHORIZED else None
        return JSONResponse(status_code=exc.http_status, content=exc.to_response(), headers=headers)
