"""FastAPI app factory: health endpoint, request logging and the proxy routers."""
from __future__ import annotations

import os
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api import router as api_router
from .api.routing import validation_failure
from .config import resolve_log_level
from .logging_conf import get_logger, setup_logging

# Configure logging before anything else.
setup_logging(resolve_log_level())
logger = get_logger("newsgate")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("startup", extra={"event": "startup"})
    yield
    logger.info("shutdown", extra={"event": "shutdown"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="newsgate",
        version=os.getenv("APP_VERSION", "0.1.0"),
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def request_logger(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """JSON request logging with a correlation id.

        - If the client sends X-Request-ID we propagate it; otherwise we mint one
        - The same id is forwarded to the backend and echoed on the response
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_failed(request: Request, exc: RequestValidationError) -> JSONResponse:
        return validation_failure(exc)

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    app.include_router(api_router)

    return app


# ASGI entrypoint for uvicorn: `uvicorn newsgate.main:app --port 3000`
app = create_app()
