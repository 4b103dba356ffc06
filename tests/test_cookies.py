from __future__ import annotations

import httpx
from fastapi.responses import JSONResponse

from newsgate.domain.cookies import (
    LEGACY_SESSION_COOKIE,
    SESSION_COOKIE,
    expire_cookie,
    iter_set_cookies,
    relay_set_cookies,
    split_set_cookie_header,
)


def test_comma_inside_expires_does_not_split():
    parts = split_set_cookie_header("a=1, Expires=Wed, 09 Jun 2025 10:18:14 GMT; b=2")
    assert len(parts) == 2
    assert parts[0] == "a=1"


def test_split_keeps_attribute_strings_verbatim():
    header = (
        "dailyvaibe_admin_session=abc123; Path=/; Expires=Wed, 09 Jun 2025 10:18:14 GMT; "
        "HttpOnly; Secure; SameSite=None, connect.sid=s%3Axyz; Path=/; Max-Age=3600"
    )
    parts = split_set_cookie_header(header)
    assert parts == [
        "dailyvaibe_admin_session=abc123; Path=/; Expires=Wed, 09 Jun 2025 10:18:14 GMT; "
        "HttpOnly; Secure; SameSite=None",
        "connect.sid=s%3Axyz; Path=/; Max-Age=3600",
    ]


def test_split_empty_values():
    assert split_set_cookie_header(None) == []
    assert split_set_cookie_header("") == []
    assert split_set_cookie_header(" , ") == []
    assert split_set_cookie_header(",,") == []


def test_split_drops_stray_commas_between_cookies():
    assert split_set_cookie_header("a=1; Path=/, , b=2,") == ["a=1; Path=/", "b=2"]
    out = JSONResponse({})
    assert relay_set_cookies({"set-cookie": " , "}, out) == 0
    assert out.headers.getlist("set-cookie") == []


def test_structured_accessor_is_preferred():
    source = httpx.Response(
        200,
        headers=[
            ("set-cookie", "a=1; Expires=Wed, 09 Jun 2025 10:18:14 GMT"),
            ("set-cookie", "b=2; HttpOnly"),
        ],
    )
    assert list(iter_set_cookies(source)) == [
        "a=1; Expires=Wed, 09 Jun 2025 10:18:14 GMT",
        "b=2; HttpOnly",
    ]


def test_single_string_header_is_split():
    assert list(iter_set_cookies({"set-cookie": "a=1; Path=/, b=2; Path=/"})) == [
        "a=1; Path=/",
        "b=2; Path=/",
    ]


def test_relay_appends_each_cookie():
    source = httpx.Response(
        200,
        headers=[
            ("set-cookie", f"{SESSION_COOKIE}=tok; Path=/; HttpOnly; SameSite=Lax"),
            ("set-cookie", f"{LEGACY_SESSION_COOKIE}=s%3A1; Path=/"),
        ],
    )
    out = JSONResponse({"success": True})
    assert relay_set_cookies(source, out) == 2
    assert out.headers.getlist("set-cookie") == [
        f"{SESSION_COOKIE}=tok; Path=/; HttpOnly; SameSite=Lax",
        f"{LEGACY_SESSION_COOKIE}=s%3A1; Path=/",
    ]


def test_relay_is_noop_for_missing_inputs():
    out = JSONResponse({})
    assert relay_set_cookies(None, out) == 0
    assert relay_set_cookies(httpx.Response(200), None) == 0
    assert relay_set_cookies(httpx.Response(200), out) == 0
    assert out.headers.getlist("set-cookie") == []


def test_relay_never_raises_on_odd_destination():
    source = httpx.Response(200, headers=[("set-cookie", "a=1")])
    assert relay_set_cookies(source, object()) == 0


class _FlakyHeaders:
    def __init__(self, fail_after: int) -> None:
        self.appended: list[str] = []
        self.fail_after = fail_after

    def append(self, name: str, value: str) -> None:
        if len(self.appended) == self.fail_after:
            raise RuntimeError("header store full")
        self.appended.append(value)


class _FlakyResponse:
    def __init__(self, fail_after: int) -> None:
        self.headers = _FlakyHeaders(fail_after)


def test_relay_counts_cookies_copied_before_a_failure():
    source = httpx.Response(
        200, headers=[("set-cookie", "a=1"), ("set-cookie", "b=2"), ("set-cookie", "c=3")]
    )
    out = _FlakyResponse(fail_after=2)
    assert relay_set_cookies(source, out) == 2
    assert out.headers.appended == ["a=1", "b=2"]


def test_expire_cookie_production_attributes():
    out = JSONResponse({})
    expire_cookie(out, SESSION_COOKIE, production=True)
    (header,) = out.headers.getlist("set-cookie")
    lowered = header.lower()
    assert header.startswith(f"{SESSION_COOKIE}=")
    assert "max-age=0" in lowered
    assert "httponly" in lowered
    assert "secure" in lowered
    assert "samesite=none" in lowered
    assert "path=/" in lowered


def test_expire_cookie_development_attributes():
    out = JSONResponse({})
    expire_cookie(out, LEGACY_SESSION_COOKIE, production=False)
    (header,) = out.headers.getlist("set-cookie")
    lowered = header.lower()
    assert "samesite=lax" in lowered
    assert "secure" not in lowered
    assert "httponly" in lowered
