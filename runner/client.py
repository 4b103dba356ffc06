from __future__ import annotations

import asyncio
import time

import httpx

from newsgate.logging_conf import get_logger
from runner.types import CheckError, CheckResult, SmokeError

logger = get_logger("runner.client")


async def wait_for_health(base_url: str, timeout_s: float = 20.0) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                if r.status_code == 200 and r.json().get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except (httpx.TransportError, ValueError) as e:
                logger.debug("health.waiting", extra={"event": "health_waiting", "error": str(e)})
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


async def _with_retries(name: str, attempt_once, *, retries: int) -> CheckResult:
    last_err: Exception | None = None
    for attempt in range(retries):
        try:
            return await attempt_once()
        except (httpx.TransportError, CheckError) as e:
            last_err = e
            logger.warning(
                "check.retry",
                extra={
                    "event": "check_retry",
                    "check": name,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
            await asyncio.sleep(0.25 * (2**attempt))
    raise CheckError(f"{name} failed: {last_err}")


async def check_preflight(
    client: httpx.AsyncClient, origin: str, *, retries: int = 3
) -> CheckResult:
    """OPTIONS on the admin create endpoint must echo our Origin."""

    async def once() -> CheckResult:
        started = time.perf_counter()
        r = await client.options(
            "/api/admin/createposts",
            headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
        )
        allowed = r.headers.get("access-control-allow-origin")
        if r.status_code >= 500:
            raise CheckError(f"preflight returned {r.status_code}")
        return CheckResult(
            name="preflight",
            ok=r.status_code == 200 and allowed == origin,
            status_code=r.status_code,
            elapsed_ms=round((time.perf_counter() - started) * 1000.0, 2),
            detail={"allow_origin": allowed},
        )

    return await _with_retries("preflight", once, retries=retries)


async def check_category_groups(client: httpx.AsyncClient, *, retries: int = 3) -> CheckResult:
    """The public navigation must list at least one category group."""

    async def once() -> CheckResult:
        started = time.perf_counter()
        r = await client.get("/api/client/categories")
        if r.status_code >= 500:
            raise CheckError(f"categories returned {r.status_code}")
        body = r.json()
        groups = body.get("groups") or {}
        return CheckResult(
            name="category_groups",
            ok=bool(body.get("success")) and len(groups) > 0,
            status_code=r.status_code,
            elapsed_ms=round((time.perf_counter() - started) * 1000.0, 2),
            detail={"groups": sorted(groups)},
        )

    return await _with_retries("category_groups", once, retries=retries)


async def check_delete_requires_session(client: httpx.AsyncClient) -> CheckResult:
    """An anonymous delete must be refused locally with 401."""
    started = time.perf_counter()
    r = await client.delete("/api/admin/delete/0")
    return CheckResult(
        name="delete_requires_session",
        ok=r.status_code == 401,
        status_code=r.status_code,
        elapsed_ms=round((time.perf_counter() - started) * 1000.0, 2),
    )
