#!/usr/bin/env python3
"""High-level smoke runner for a deployed proxy.

Steps:
- wait for server health
- send a CORS preflight to the admin create endpoint
- fetch the public category groups
- confirm an anonymous delete is refused
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from newsgate.config import resolve_log_level
from newsgate.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import (
    check_category_groups,
    check_delete_requires_session,
    check_preflight,
    wait_for_health,
)
from runner.types import CheckError, CheckResult
from runner.utils import summarize

setup_logging(resolve_log_level())
logger = get_logger("runner")


async def run_smoke(
    *, base_url: str, origin: str, timeout_s: float = 30.0, retries: int = 3
) -> int:
    await wait_for_health(base_url, timeout_s=timeout_s)
    results: list[CheckResult] = []
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout_s) as client:
        checks = (
            ("preflight", lambda: check_preflight(client, origin, retries=retries)),
            ("category_groups", lambda: check_category_groups(client, retries=retries)),
            ("delete_requires_session", lambda: check_delete_requires_session(client)),
        )
        for name, check in checks:
            try:
                results.append(await check())
            except CheckError as e:
                results.append(CheckResult(name=name, ok=False, detail={"error": str(e)}))
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv or sys.argv[1:])
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            origin=args.origin,
            timeout_s=args.timeout,
            retries=args.retries,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
