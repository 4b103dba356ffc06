from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

__all__ = [
    "ProxyError",
    "InvalidRequest",
    "AuthenticationRequired",
    "BackendUnavailable",
    "BackendContractError",
]


class ProxyError(Exception):
    """Base class for failures reported to the browser as structured JSON.

    The `code` attribute lets clients branch on a stable machine code; extra
    keyword arguments end up verbatim in the response body as diagnostics.
    """

    code: str = "proxy_error"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.error = error if error is not None else message
        self.extra = extra

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "error": self.error,
            "code": self.code,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        for key, value in self.extra.items():
            if value is not None and key not in payload:
                payload[key] = value
        return payload


class InvalidRequest(ProxyError):
    code = "invalid_request"
    status_code = 400


class AuthenticationRequired(ProxyError):
    code = "authentication_required"
    status_code = 401


class BackendUnavailable(ProxyError):
    """Transport failure (timeout, DNS, refused connection) after retries."""

    code = "backend_unavailable"
    status_code = 500


class BackendContractError(ProxyError):
    """Backend answered with something other than the JSON it promises."""

    code = "backend_contract_violation"
    status_code = 500
