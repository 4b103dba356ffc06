from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from ..logging_conf import get_logger

__all__ = [
    "SESSION_COOKIE",
    "LEGACY_SESSION_COOKIE",
    "split_set_cookie_header",
    "iter_set_cookies",
    "relay_set_cookies",
    "expire_cookie",
]

SESSION_COOKIE = "dailyvaibe_admin_session"
LEGACY_SESSION_COOKIE = "connect.sid"

# A comma starts a new cookie only when the next thing is `token=`; the commas
# inside `Expires=Wed, 09 Jun 2025 ...` are followed by a date, not a token.
_COOKIE_BOUNDARY_RE = re.compile(r",(?=\s*[!#$%&'*+\-.^_`|~0-9A-Za-z]+=)")

logger = get_logger("domain.cookies")


def split_set_cookie_header(value: str | None) -> list[str]:
    """Split a comma-joined Set-Cookie header into individual directives."""
    if not value:
        return []
    parts = (part.strip().strip(",").strip() for part in _COOKIE_BOUNDARY_RE.split(value))
    return [part for part in parts if part]


def _headers_of(source: Any) -> Any:
    return getattr(source, "headers", source)


def iter_set_cookies(source: Any) -> Iterable[str]:
    """Yield each Set-Cookie directive carried by a response or header object.

    A structured multi-value accessor wins; the single combined string is
    split only when no such accessor is available or it came back empty.
    """
    if source is None:
        return []
    if isinstance(source, str):
        return split_set_cookie_header(source)

    headers = _headers_of(source)
    if headers is None:
        return []

    for accessor in ("get_list", "getlist", "get_all"):
        getter = getattr(headers, accessor, None)
        if callable(getter):
            values = [v.strip() for v in getter("set-cookie") or [] if isinstance(v, str)]
            values = [v for v in values if v]
            if values:
                return values
            break

    getter = getattr(headers, "get", None)
    if not callable(getter):
        return []
    combined = getter("set-cookie") or getter("Set-Cookie")
    if not isinstance(combined, str):
        return []
    return split_set_cookie_header(combined)


def relay_set_cookies(source: Any, destination: Any) -> int:
    """Copy every Set-Cookie directive from `source` onto `destination`.

    Attribute strings pass through untouched. Returns the number of cookies
    copied; absent inputs are a no-op and this never raises.
    """
    if source is None or destination is None:
        return 0
    copied = 0
    try:
        for cookie in list(iter_set_cookies(source)):
            destination.headers.append("set-cookie", cookie)
            copied += 1
    except Exception:  # noqa: BLE001
        logger.warning(
            "cookies.relay_failed",
            extra={"event": "cookies_relay_failed", "copied": copied},
            exc_info=True,
        )
    return copied


def expire_cookie(response: Any, name: str, *, production: bool) -> None:
    """Clear a browser cookie with the attributes it was issued with.

    Production cookies are cross-site (`Secure`, `SameSite=None`); elsewhere
    they are plain `SameSite=Lax` so they still work over http://localhost.
    """
    response.set_cookie(
        key=name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=production,
        samesite="none" if production else "lax",
    )
