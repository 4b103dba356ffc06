"""Route classes shared by every proxy endpoint.

`ProxyRoute` is the catch-all: whatever a handler raises, the browser gets a
structured `{success: false, ...}` body. `AdminRoute` adds the credentialed
CORS headers the admin console needs, on errors as well as successes.
"""
from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException

from ..config import resolve_public_app_url
from ..errors import InvalidRequest, ProxyError
from ..logging_conf import get_logger

__all__ = [
    "ALLOWED_METHODS",
    "ALLOWED_HEADERS",
    "cors_headers",
    "validation_failure",
    "ProxyRoute",
    "AdminRoute",
]

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization, X-CSRF-Token, Cookie"

logger = get_logger("api")


def cors_headers(request: Request) -> dict[str, str]:
    """Echo the caller's Origin, or fall back to the public app URL."""
    origin = request.headers.get("origin") or resolve_public_app_url()
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Access-Control-Allow-Credentials": "true",
        "Vary": "Origin",
    }


def validation_failure(exc: RequestValidationError) -> JSONResponse:
    failure = InvalidRequest("Invalid request", error=str(exc.errors()))
    return JSONResponse(failure.to_payload(), status_code=status.HTTP_400_BAD_REQUEST)


class ProxyRoute(APIRoute):
    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original = super().get_route_handler()

        async def handler(request: Request) -> Response:
            try:
                response = await original(request)
            except HTTPException as exc:
                # Starlette renders these; the headers ride along on the exception.
                exc.headers = {**(exc.headers or {}), **self.extra_headers(request)}
                raise
            except RequestValidationError as exc:
                response = validation_failure(exc)
            except ProxyError as exc:
                logger.warning(
                    "request.rejected",
                    extra={
                        "event": "request_rejected",
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": exc.status_code,
                        "code": exc.code,
                        "detail": exc.message,
                    },
                )
                response = JSONResponse(exc.to_payload(), status_code=exc.status_code)
            except Exception as exc:
                logger.exception(
                    "request.unhandled",
                    extra={
                        "event": "request_unhandled",
                        "method": request.method,
                        "path": request.url.path,
                    },
                )
                failure = ProxyError(
                    "Internal server error",
                    error=str(exc) or type(exc).__name__,
                    error_type=type(exc).__name__,
                )
                response = JSONResponse(failure.to_payload(), status_code=failure.status_code)
            response.headers.update(self.extra_headers(request))
            return response

        return handler

    def extra_headers(self, request: Request) -> dict[str, str]:
        """Headers added to every response of this route, errors included."""
        return {}


class AdminRoute(ProxyRoute):
    def extra_headers(self, request: Request) -> dict[str, str]:
        return cors_headers(request)
