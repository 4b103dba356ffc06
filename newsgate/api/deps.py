from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends

from ..config import Settings, get_settings
from ..logging_conf import get_logger
from ..service.relay import BackendRelay


def request_settings() -> Settings:
    """Settings for the current request, read fresh from the environment."""
    return get_settings()


async def get_http_client(
    settings: Settings = Depends(request_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.timeout_ms / 1000.0) as client:
        yield client


def get_relay(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(request_settings),
) -> BackendRelay:
    return BackendRelay(client, settings, logger=get_logger("relay"))
