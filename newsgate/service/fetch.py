from __future__ import annotations

import asyncio
from typing import Any

import httpx

from ..logging_conf import get_logger

__all__ = ["BackendTimeout", "backoff_delay_ms", "request_with_retry"]

logger = get_logger("service.fetch")


class BackendTimeout(httpx.TimeoutException):
    """Raised when a single attempt exceeds its hard deadline."""


def backoff_delay_ms(attempt: int, *, base_ms: int, cap_ms: int) -> int:
    """Return the pause before retrying after `attempt` (0-based) failed."""
    return min(base_ms * (2**attempt), cap_ms)


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    content: bytes | None = None,
    data: Any = None,
    files: Any = None,
    json: Any = None,
    timeout_ms: int = 25_000,
    max_retries: int = 2,
    base_delay_ms: int = 1_000,
    max_delay_ms: int = 5_000,
) -> httpx.Response:
    """Issue one logical request with a per-attempt deadline and bounded retry.

    - Retries transport errors and 5xx responses, nothing else
    - Attempts are sequential: at most `max_retries + 1` of them
    - After the last attempt a 5xx is returned as-is; a transport error is re-raised
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    timeout_s = timeout_ms / 1000.0
    last_err: httpx.TransportError | None = None
    attempts = max_retries + 1

    for attempt in range(attempts):
        is_last = attempt == attempts - 1
        try:
            response = await asyncio.wait_for(
                client.request(
                    method,
                    url,
                    headers=headers,
                    content=content,
                    data=data,
                    files=files,
                    json=json,
                ),
                timeout=timeout_s,
            )
        except asyncio.TimeoutError:
            last_err = BackendTimeout(f"{method} {url} timed out after {timeout_ms} ms")
            reason = "timeout"
        except httpx.TransportError as e:
            last_err = e
            reason = type(e).__name__
        else:
            if response.status_code < 500 or is_last:
                return response
            last_err = None
            reason = f"status_{response.status_code}"

        if is_last:
            break

        delay_ms = backoff_delay_ms(attempt, base_ms=base_delay_ms, cap_ms=max_delay_ms)
        logger.warning(
            "backend.retry",
            extra={
                "event": "backend_retry",
                "method": method,
                "url": url,
                "attempt": attempt + 1,
                "reason": reason,
                "delay_ms": delay_ms,
            },
        )
        await asyncio.sleep(delay_ms / 1000.0)

    assert last_err is not None
    raise last_err
