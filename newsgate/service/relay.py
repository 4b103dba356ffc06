from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse

from ..config import Settings
from ..domain.cookies import relay_set_cookies
from ..domain.payloads import decode_backend_body, preview
from ..errors import AuthenticationRequired, BackendContractError, BackendUnavailable, InvalidRequest
from ..logging_conf import get_logger
from .fetch import request_with_retry

__all__ = ["JSON_CONTENT_TYPE", "BackendRelay", "require_session", "read_json_body"]

JSON_CONTENT_TYPE = "application/json"

# Inbound headers passed to the backend untouched.
_FORWARDED_HEADERS = ("cookie", "x-csrf-token", "user-agent")


def require_session(request: Request) -> str:
    """Return the inbound Cookie header or reject the request with 401."""
    cookie = request.headers.get("cookie", "")
    if not cookie.strip():
        raise AuthenticationRequired("Authentication required")
    return cookie


async def read_json_body(request: Request, *, required: bool = True) -> dict[str, Any] | None:
    """Decode the inbound JSON object body.

    An empty body is `None` when not required; anything that is not a JSON
    object is rejected with 400.
    """
    raw = await request.body()
    if not raw.strip():
        if required:
            raise InvalidRequest("Request body is required")
        return None
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise InvalidRequest("Request body must be valid JSON", error=str(e)) from e
    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return data


class BackendRelay:
    """Forwards one inbound request to the backend and shapes the reply.

    Built per request by the `get_relay` dependency; holds no state beyond
    the request it serves.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.settings = settings
        self.logger = logger or get_logger("service.relay")

    @staticmethod
    def forward_headers(request: Request, *, content_type: str | None = None) -> dict[str, str]:
        headers = {"Accept": JSON_CONTENT_TYPE}
        for name in _FORWARDED_HEADERS:
            value = request.headers.get(name)
            if value:
                headers[name] = value
        request_id = request.headers.get("x-request-id") or getattr(
            request.state, "request_id", None
        )
        if request_id:
            headers["x-request-id"] = request_id
        if content_type:
            headers["content-type"] = content_type
        return headers

    async def send(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str],
        content: bytes | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Call the backend through the retry wrapper.

        Raises:
            BackendUnavailable: when every attempt failed at the transport level.
        """
        url = self.settings.backend_endpoint(path)
        started = time.perf_counter()
        try:
            response = await request_with_retry(
                self.client,
                method,
                url,
                headers=headers,
                content=content,
                json=json,
                timeout_ms=self.settings.timeout_ms,
                max_retries=self.settings.max_retries,
                base_delay_ms=self.settings.retry_base_ms,
                max_delay_ms=self.settings.retry_cap_ms,
            )
        except httpx.TransportError as e:
            self.logger.error(
                "backend.unreachable",
                extra={
                    "event": "backend_unreachable",
                    "method": method,
                    "url": url,
                    "error": str(e) or type(e).__name__,
                },
            )
            raise BackendUnavailable(
                "Failed to connect to backend",
                error=str(e) or type(e).__name__,
                backend_url=url,
            ) from e

        self.logger.info(
            "backend.response",
            extra={
                "event": "backend_response",
                "method": method,
                "url": url,
                "status_code": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000.0, 2),
            },
        )
        self.logger.debug(
            "backend.body",
            extra={"event": "backend_body", "url": url, "preview": preview(response.text)},
        )
        return response

    def read_json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            return decode_backend_body(response.text, response.status_code)
        except BackendContractError as e:
            self.logger.error(
                "backend.contract_violation",
                extra={
                    "event": "backend_contract_violation",
                    "status_code": response.status_code,
                    "detail": e.message,
                    "html_title": e.extra.get("html_title"),
                },
            )
            raise

    def relay(
        self,
        response: httpx.Response,
        *,
        success_status: int = 200,
        headers: dict[str, str] | None = None,
    ) -> JSONResponse:
        """Turn a backend reply into the browser reply.

        Backend errors keep their status and body; successes get the
        operation's fixed status plus every cookie the backend set.
        """
        data = self.read_json(response)
        if not response.is_success:
            self.logger.warning(
                "backend.error",
                extra={
                    "event": "backend_error",
                    "status_code": response.status_code,
                    "backend_message": data.get("message"),
                },
            )
            return JSONResponse(data, status_code=response.status_code)

        out = JSONResponse(data, status_code=success_status, headers=headers)
        relay_set_cookies(response, out)
        return out
